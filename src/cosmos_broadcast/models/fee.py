"""
Fee models: gas, gas price and the fee coin list.

Amounts are Decimals end to end; on the wire they are plain decimal strings
("0.005", never "5E-3").
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer

DEFAULT_DENOM = "uatom"
DEFAULT_GAS_PRICE = Decimal("0.000000025")  # 2.5e-8 at 9 fractional digits


def format_decimal(value: Decimal) -> str:
    """Render without exponent and without trailing zeros."""
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


class Coin(BaseModel):
    amount: Decimal = Field(ge=0)
    denom: str

    @field_serializer("amount", when_used="json")
    def _amount_str(self, amount: Decimal) -> str:
        return format_decimal(amount)


class GasPrice(Coin):
    """Price of a single unit of gas."""


class FeeOptions(BaseModel):
    """Caller-supplied fee settings for one send."""
    gas: int = Field(gt=0)
    gas_price: GasPrice = Field(
        default_factory=lambda: GasPrice(amount=DEFAULT_GAS_PRICE, denom=DEFAULT_DENOM),
        alias="gasPrice",
    )
    memo: str = ""

    model_config = {"populate_by_name": True}

    @property
    def fee_amount(self) -> Decimal:
        return self.gas_price.amount * self.gas


class Fee(BaseModel):
    amount: list[Coin] = Field(default_factory=list)
    gas: int

    @field_serializer("gas", when_used="json")
    def _gas_str(self, gas: int) -> str:
        return str(gas)
