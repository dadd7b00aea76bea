from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Optional

from domain.registry import TransferableRegistry


class CommandKind(Enum):
    UNKNOWN = "unknown"
    HELP = "help"
    BALANCE = "balance"
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TIP = "tip"


@dataclass
class ParsedCommand:
    """
    Structured form of a chat command.

    Fields are copied from the matched text; nothing here has been
    checked against the ledger or the account store.
    """

    kind: CommandKind
    address: Optional[str] = None
    recipient: Optional[str] = None
    amount: Optional[Decimal] = None
    unit: Optional[str] = None
    comment: Optional[str] = None


UNKNOWN = ParsedCommand(kind=CommandKind.UNKNOWN)

ADDRESS_PATTERN = r"NXT-[A-Z0-9\-]+"
AMOUNT_PATTERN = r"[0-9]+(?:\.[0-9]*)?"
MENTION_RE = re.compile(r"<@!?([A-Za-z0-9]+)>")

_SINGLE_WORD_COMMANDS = {
    "help": CommandKind.HELP,
    "balance": CommandKind.BALANCE,
    "deposit": CommandKind.DEPOSIT,
}

_WITHDRAW_RE = re.compile(
    rf"(?i:withdraw) +({ADDRESS_PATTERN}) +({AMOUNT_PATTERN})(?: +([A-Za-z]+))?"
)


def _parse_amount(text: str) -> Optional[Decimal]:
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def parse_private_command(text: str, registry: TransferableRegistry) -> ParsedCommand:
    """
    Classify a direct message.

    Keywords are case-insensitive and surrounding whitespace is ignored.
    A withdraw without a unit defaults to the native currency.
    """

    message = (text or "").strip()
    if not message:
        return UNKNOWN

    single = _SINGLE_WORD_COMMANDS.get(message.lower())
    if single is not None:
        return ParsedCommand(kind=single)

    match = _WITHDRAW_RE.fullmatch(message)
    if match is None:
        return UNKNOWN

    amount = _parse_amount(match.group(2))
    if amount is None:
        return UNKNOWN

    return ParsedCommand(
        kind=CommandKind.WITHDRAW,
        address=match.group(1),
        amount=amount,
        unit=match.group(3) or registry.native.name,
    )


@lru_cache(maxsize=8)
def _tip_regex(bot_name: str) -> re.Pattern:
    return re.compile(
        rf"(?i:{re.escape(bot_name)} +tip) +(<@!?[A-Za-z0-9]+>|{ADDRESS_PATTERN})"
        rf" +({AMOUNT_PATTERN})(?: +(.*))?",
        re.DOTALL,
    )


def parse_channel_command(
    text: str,
    bot_name: str,
    registry: TransferableRegistry,
) -> ParsedCommand:
    """
    Classify a channel message addressed to the bot.

    The word following the amount is taken as the unit only when the
    registry knows it; otherwise it starts the free-text comment.
    """

    message = (text or "").strip()
    match = _tip_regex(bot_name).fullmatch(message)
    if match is None:
        return UNKNOWN

    amount = _parse_amount(match.group(2))
    if amount is None:
        return UNKNOWN

    unit = registry.native.name
    comment = (match.group(3) or "").strip()
    if comment:
        first, _, rest = comment.partition(" ")
        if first.isalpha() and registry.resolve(first) is not None:
            unit = first
            comment = rest.strip()

    return ParsedCommand(
        kind=CommandKind.TIP,
        recipient=match.group(1),
        amount=amount,
        unit=unit,
        comment=comment or None,
    )


def mentioned_user_id(token: str) -> Optional[str]:
    """Return the user ID inside a `<@id>` mention, or None for anything else."""

    match = MENTION_RE.fullmatch(token or "")
    if match is None:
        return None
    return match.group(1)
