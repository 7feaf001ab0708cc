import pytest

NODE = "http://node.test:1317"
CHAIN_ID = "cosmoshub-3"
SENDER = "cosmos1sender"

MSG_SEND = {
    "type": "cosmos-sdk/MsgSend",
    "value": {
        "from_address": SENDER,
        "to_address": "cosmos1recipient",
        "amount": [{"denom": "uatom", "amount": "10"}],
    },
}

ACCOUNT_JSON = {
    "height": "100",
    "result": {
        "type": "cosmos-sdk/Account",
        "value": {
            "address": SENDER,
            "coins": [{"denom": "uatom", "amount": "1000"}],
            "public_key": None,
            "account_number": "12",
            "sequence": "3",
        },
    },
}


@pytest.fixture
def msg_send():
    return dict(MSG_SEND)
