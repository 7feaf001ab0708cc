"""
Default chain error-code lookup (Cosmos SDK root codespace).

Callers with a richer table pass their own `code_to_message` callable.
"""

from typing import Callable

CodeToMessage = Callable[[int], str]

SDK_ERROR_MESSAGES: dict[int, str] = {
    1: "internal error",
    2: "tx parse error",
    3: "invalid sequence",
    4: "unauthorized",
    5: "insufficient funds",
    6: "unknown request",
    7: "invalid address",
    8: "invalid pubkey",
    9: "unknown address",
    10: "insufficient coins",
    11: "invalid coins",
    12: "out of gas",
    13: "memo too large",
    14: "insufficient fee",
    15: "too many signatures",
    16: "gas overflow",
    17: "no signatures",
}


def code_to_message(code: int) -> str:
    return SDK_ERROR_MESSAGES.get(code, f"unknown error (code {code})")
