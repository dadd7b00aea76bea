from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


@dataclass
class Account:
    """
    Ledger identity of a chat user.

    This model is intentionally simple and independent of any
    particular transport (Discord, Slack, web) or database schema.
    Accounts the bot provisioned itself also carry the secret phrase
    and public key needed to send from them.
    """

    user_id: str
    address: str
    secret_phrase: Optional[str] = None
    public_key: Optional[str] = None


class TransferableKind(Enum):
    NXT = "nxt"
    CURRENCY = "currency"
    ASSET = "asset"


@dataclass(frozen=True)
class Transferable:
    """
    Something that can be moved on the ledger: NXT itself, a monetary
    system currency or an asset.

    `recipient_message` is only meaningful for assets; it is a template
    with `{amount}` and `{sender}` placeholders sent to users the first
    time they receive the asset.
    """

    kind: TransferableKind
    name: str
    decimals: int
    ledger_id: Optional[str] = None
    recipient_message: Optional[str] = None

    @property
    def factor(self) -> Decimal:
        return Decimal(10) ** self.decimals

    @property
    def is_native(self) -> bool:
        return self.kind is TransferableKind.NXT

    def is_representable(self, amount: Decimal) -> bool:
        """True when `amount` is a whole number of base units."""

        quantity = amount * self.factor
        return quantity == quantity.to_integral_value()

    def has_recipient_message(self) -> bool:
        return self.kind is TransferableKind.ASSET and bool(self.recipient_message)


NXT = Transferable(kind=TransferableKind.NXT, name="NXT", decimals=8)

FEE_RESERVE = Decimal(1)


@dataclass(frozen=True)
class TransferResult:
    """Outcome of submitting a transfer to the ledger."""

    transaction_id: Optional[str] = None
    invalid_address: bool = False

    @property
    def ok(self) -> bool:
        return self.transaction_id is not None and not self.invalid_address

    @classmethod
    def success(cls, transaction_id: str) -> "TransferResult":
        return cls(transaction_id=transaction_id)

    @classmethod
    def rejected_address(cls) -> "TransferResult":
        return cls(invalid_address=True)


class LedgerError(Exception):
    """Raised by ledger clients on network or validation failures."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.error_code = error_code
