from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from domain.models import FEE_RESERVE, Transferable, TransferableKind


class RejectionReason(Enum):
    UNKNOWN_UNIT = "unknown_unit"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_FUNDS_NEED_FEE = "insufficient_funds_need_fee"


@dataclass(frozen=True)
class VerificationOutcome:
    """
    Result of checking a transfer request against live balances.

    `balance` is the balance the rejection message should report: the
    NXT balance for fee problems, otherwise the balance of the unit
    being sent.
    """

    reason: Optional[RejectionReason] = None
    balance: Optional[Decimal] = None

    @property
    def proceed(self) -> bool:
        return self.reason is None


PROCEED = VerificationOutcome()


def _reject(reason: RejectionReason, balance: Optional[Decimal] = None) -> VerificationOutcome:
    return VerificationOutcome(reason=reason, balance=balance)


def verify_fee_reserve(
    transferable: Optional[Transferable],
    amount: Decimal,
    native_balance: Decimal,
) -> VerificationOutcome:
    """
    First tier of `verify`: the checks that only need the NXT balance.

    Lets callers skip fetching the secondary balance when the fee
    reserve is already missing.
    """

    if transferable is None:
        return _reject(RejectionReason.UNKNOWN_UNIT)

    if transferable.kind is TransferableKind.NXT:
        if native_balance < amount:
            return _reject(RejectionReason.INSUFFICIENT_FUNDS, native_balance)
        if native_balance < amount + FEE_RESERVE:
            return _reject(RejectionReason.INSUFFICIENT_FUNDS_NEED_FEE, native_balance)
        return PROCEED

    if native_balance < FEE_RESERVE:
        return _reject(RejectionReason.INSUFFICIENT_FUNDS_NEED_FEE, native_balance)
    return PROCEED


def verify(
    transferable: Optional[Transferable],
    amount: Decimal,
    native_balance: Decimal,
    transferable_balance: Optional[Decimal] = None,
) -> VerificationOutcome:
    """
    Decide whether a transfer of `amount` may go ahead.

    Fees are always paid in NXT, so NXT transfers need `amount + 1` NXT
    while currency and asset transfers need 1 NXT on top of a
    sufficient balance in their own unit.
    """

    outcome = verify_fee_reserve(transferable, amount, native_balance)
    if not outcome.proceed or transferable.kind is TransferableKind.NXT:
        return outcome

    balance = transferable_balance if transferable_balance is not None else Decimal(0)
    if balance < amount:
        return _reject(RejectionReason.INSUFFICIENT_FUNDS, balance)
    return PROCEED
