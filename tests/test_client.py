"""End-to-end send pipeline against a mocked node."""

import json

import httpx
import pytest
import respx

from cosmos_broadcast import AsyncTxClient, ClientConfig, TxClient, send
from cosmos_broadcast.errors import (
    ChainRejectionError,
    InclusionTimeoutError,
    MalformedResponseError,
    SigningError,
    TransportError,
)
from cosmos_broadcast.getters import RestGetters
from cosmos_broadcast.models import AccountMeta, SignResult
from cosmos_broadcast.transport.http import HttpClient

from tests.conftest import ACCOUNT_JSON, CHAIN_ID, NODE, SENDER

FEE = {"gas": 200000, "gasPrice": {"amount": "0.000000025", "denom": "uatom"}}


class FakeSigner:
    def __init__(self):
        self.messages: list[str] = []

    async def sign(self, sign_message: str):
        self.messages.append(sign_message)
        return {"signature": b"\x01\x02", "publicKey": b"\x03"}


@pytest.fixture
def node():
    with respx.mock(base_url=NODE, assert_all_called=False) as mock:
        mock.get(f"/auth/accounts/{SENDER}").respond(json=ACCOUNT_JSON)
        yield mock


def make_client(**kwargs) -> AsyncTxClient:
    cfg = ClientConfig(node_url=NODE, chain_id=CHAIN_ID, inclusion_delay_ms=0, inclusion_iterations=3)
    return AsyncTxClient(config=cfg, **kwargs)


class TestSend:
    @pytest.mark.asyncio
    async def test_success(self, node, msg_send):
        route = node.post("/txs").respond(json={"txhash": "ABC123", "height": "0"})
        signer = FakeSigner()

        async with make_client() as client:
            handle = await client.send(FEE, [msg_send], SENDER, signer)

        assert handle.hash == "ABC123"
        assert handle.sequence == 3

        body = json.loads(route.calls.last.request.content)
        assert body["mode"] == "sync"
        assert body["tx"]["fee"]["amount"] == [{"amount": "0.005", "denom": "uatom"}]
        assert body["tx"]["signatures"] == [{
            "signature": "AQI=",
            "pub_key": {"type": "tendermint/PubKeySecp256k1", "value": "Aw=="},
            "account_number": "12",
            "sequence": "3",
        }]

        signed_payload = json.loads(signer.messages[0])
        assert signed_payload["chain_id"] == CHAIN_ID
        assert signed_payload["sequence"] == "3"
        assert signed_payload["account_number"] == "12"

    @pytest.mark.asyncio
    async def test_mode_override(self, node, msg_send):
        route = node.post("/txs").respond(json={"txhash": "ABC123"})
        async with make_client() as client:
            await client.send(FEE, [msg_send], SENDER, FakeSigner(), mode="block")
        assert json.loads(route.calls.last.request.content)["mode"] == "block"

    @pytest.mark.asyncio
    async def test_config_denom_for_dict_fee_without_price(self, node, msg_send):
        route = node.post("/txs").respond(json={"txhash": "ABC123"})
        cfg = ClientConfig(node_url=NODE, chain_id=CHAIN_ID, default_denom="stake")
        async with AsyncTxClient(config=cfg) as client:
            await client.send({"gas": 1000}, [msg_send], SENDER, FakeSigner())
        fee = json.loads(route.calls.last.request.content)["tx"]["fee"]
        assert fee == {"amount": [{"amount": "0.000025", "denom": "stake"}], "gas": "1000"}

    @pytest.mark.asyncio
    async def test_chain_rejection(self, node, msg_send):
        node.post("/txs").respond(json={"code": 4, "codespace": "sdk"})
        async with make_client(code_to_message=lambda code: "insufficient funds") as client:
            with pytest.raises(ChainRejectionError) as excinfo:
                await client.send(FEE, [msg_send], SENDER, FakeSigner())
        assert str(excinfo.value) == "Error sending: insufficient funds"

    @pytest.mark.asyncio
    async def test_malformed_response(self, node, msg_send):
        node.post("/txs").respond(json={"message": "invalid request"})
        async with make_client() as client:
            with pytest.raises(MalformedResponseError, match="invalid request"):
                await client.send(FEE, [msg_send], SENDER, FakeSigner())

    @pytest.mark.asyncio
    async def test_http_error_with_embedded_json(self, node, msg_send):
        node.post("/txs").respond(
            500, text='Msg 0 failed: {"code":102,"message":"existing unbonding delegation found"}'
        )
        async with make_client() as client:
            with pytest.raises(TransportError) as excinfo:
                await client.send(FEE, [msg_send], SENDER, FakeSigner())
        assert str(excinfo.value) == "existing unbonding delegation found"
        assert excinfo.value.details["status"] == 500

    @pytest.mark.asyncio
    async def test_http_error_json_body(self, node, msg_send):
        node.post("/txs").respond(400, json={"error": "unauthorized: signature verification failed"})
        async with make_client() as client:
            with pytest.raises(TransportError, match="signature verification failed"):
                await client.send(FEE, [msg_send], SENDER, FakeSigner())

    @pytest.mark.asyncio
    async def test_network_failure(self, node, msg_send):
        node.post("/txs").mock(side_effect=httpx.ConnectError("connection refused"))
        async with make_client() as client:
            with pytest.raises(TransportError, match="connection refused"):
                await client.send(FEE, [msg_send], SENDER, FakeSigner())

    @pytest.mark.asyncio
    async def test_account_lookup_failure_aborts_before_signing(self, node, msg_send):
        node.get("/auth/accounts/cosmos1unknown").respond(404, json={"error": "account not found"})
        route = node.post("/txs").respond(json={"txhash": "X"})
        signer = FakeSigner()
        async with make_client() as client:
            with pytest.raises(TransportError):
                await client.send(FEE, [msg_send], "cosmos1unknown", signer)
        assert signer.messages == []
        assert not route.called

    @pytest.mark.asyncio
    async def test_missing_chain_id(self, node, msg_send):
        async with AsyncTxClient(NODE) as client:
            with pytest.raises(ValueError, match="chain_id"):
                await client.send(FEE, [msg_send], SENDER, FakeSigner())


class TestSigners:
    @pytest.mark.asyncio
    async def test_sync_function_signer(self, node, msg_send):
        node.post("/txs").respond(json={"txhash": "ABC"})

        def signer(sign_message: str) -> SignResult:
            return SignResult(signature="c2ln", public_key="cHVi")

        async with make_client() as client:
            handle = await client.send(FEE, [msg_send], SENDER, signer)
        assert handle.hash == "ABC"

    @pytest.mark.asyncio
    async def test_signing_error_propagates_unchanged(self, node, msg_send):
        route = node.post("/txs").respond(json={"txhash": "ABC"})
        err = SigningError("user rejected")

        async def signer(sign_message: str):
            raise err

        async with make_client() as client:
            with pytest.raises(SigningError) as excinfo:
                await client.send(FEE, [msg_send], SENDER, signer)
        assert excinfo.value is err
        assert not route.called

    @pytest.mark.asyncio
    async def test_other_signer_errors_propagate_unchanged(self, node, msg_send):
        route = node.post("/txs").respond(json={"txhash": "ABC"})
        err = RuntimeError("device unplugged")

        def signer(sign_message: str):
            raise err

        async with make_client() as client:
            with pytest.raises(RuntimeError) as excinfo:
                await client.send(FEE, [msg_send], SENDER, signer)
        assert excinfo.value is err
        assert not route.called

    @pytest.mark.asyncio
    async def test_invalid_signer_result(self, node, msg_send):
        async with make_client() as client:
            with pytest.raises(SigningError, match="invalid result"):
                await client.send(FEE, [msg_send], SENDER, lambda m: {"sig": 1})


class TestInclusion:
    @pytest.mark.asyncio
    async def test_handle_polls_until_included(self, node, msg_send):
        node.post("/txs").respond(json={"txhash": "ABC123"})
        tx_route = node.get("/txs/ABC123").mock(side_effect=[
            httpx.Response(404, json={"error": "Tx: not found"}),
            httpx.Response(404, json={"error": "Tx: not found"}),
            httpx.Response(200, json={"txhash": "ABC123", "height": "42"}),
        ])
        async with make_client() as client:
            handle = await client.send(FEE, [msg_send], SENDER, FakeSigner())
            tx = await handle.included()
        assert tx["height"] == "42"
        assert tx_route.call_count == 3

    @pytest.mark.asyncio
    async def test_wait_for_inclusion_times_out(self, node):
        tx_route = node.get("/txs/NOPE").respond(404)
        async with make_client() as client:
            with pytest.raises(InclusionTimeoutError):
                await client.wait_for_inclusion("NOPE")
        assert tx_route.call_count == 3


class FakeGetters:
    def __init__(self):
        self.tx_calls = 0

    async def account(self, address: str):
        return {"sequence": 5, "account_number": 1}

    async def tx(self, tx_hash: str):
        self.tx_calls += 1
        return {"txhash": tx_hash}


class TestModuleSend:
    @pytest.mark.asyncio
    async def test_send_with_collaborators(self, msg_send):
        getters = FakeGetters()
        with respx.mock(base_url=NODE) as mock:
            mock.post("/txs").respond(json={"txhash": "DEF"})
            handle = await send(FEE, [msg_send], SENDER, FakeSigner(), NODE, CHAIN_ID, getters)
        assert handle.hash == "DEF"
        assert handle.sequence == 5
        await handle.check_inclusion(delay_ms=0)
        assert getters.tx_calls == 1


class TestRestGetters:
    @pytest.mark.asyncio
    async def test_wrapped_account(self, node):
        http = HttpClient(NODE)
        try:
            meta = await RestGetters(http).account(SENDER)
        finally:
            await http.close()
        assert meta == AccountMeta(sequence=3, account_number=12)

    @pytest.mark.asyncio
    async def test_flat_new_account(self, node):
        node.get("/auth/accounts/cosmos1fresh").respond(json={"account_number": "7", "sequence": "0"})
        http = HttpClient(NODE)
        try:
            meta = await RestGetters(http).account("cosmos1fresh")
        finally:
            await http.close()
        assert meta == AccountMeta(sequence=0, account_number=7)


class TestSyncClient:
    def test_send(self, node, msg_send):
        node.post("/txs").respond(json={"txhash": "SYNC1"})
        client = TxClient(node_url=NODE, chain_id=CHAIN_ID)
        try:
            handle = client.send(FEE, [msg_send], SENDER, FakeSigner())
            assert client.account(SENDER).sequence == 3
        finally:
            client.close()
        assert handle.hash == "SYNC1"
