"""
User-facing reply texts.

Everything here is pure string construction. Mentions use the
`<@user_id>` syntax understood by the chat platform.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

TRANSACTION_URL = "https://nxtportal.org/transactions/{}"

HELP_TEXT = (
    "*Direct Message Commands*\n"
    "_balance_ - Wallet balance\n"
    "_deposit_ - shows your deposit address (or creates one if you don't have one already)\n"
    "_withdraw [nxt address] amount [unit]_ - withdraws amount to specified NXT address\n\n"
    "*Channel Commands*\n"
    "_{bot_name} tip @user amount [unit] [comment]_ - sends a tip to specified user\n"
    "A word after the amount that is not a known currency or asset is read as the comment "
    "and the tip is sent in NXT."
)

UNKNOWN_COMMAND = "huh? try typing *help* for a list of available commands."

UNKNOWN_CHANNEL_COMMAND = "huh? try typing *help* for a list of available commands."

NO_ACCOUNT = "You do currently not have an account, try *deposit* command to create one."

NO_ACCOUNT_CHANNEL = (
    "Sorry mate, you do not have an account. "
    "Try sending me *help* in a direct message and I'll help you out set one up."
)

INVALID_ADDRESS = "Not a valid NXT address"

INVALID_AMOUNT = "Amount must be greater than zero."

CANT_TIP_BOT_CHANNEL = "Thanks, but I'm just a bot, I can't accept tips."

CANT_TIP_YOURSELF_CHANNEL = "Tipping yourself? That won't get you anywhere."

COMMENT_TOO_LONG_CHANNEL = "Sorry, the comment is too long, it can be 512 characters at most."

GENERIC_ERROR = "Something went wrong, please try again later."

WITHDRAW_MESSAGE = "withdraw from tipbot"


def format_amount(amount: Decimal) -> str:
    """Plain positional notation without trailing zeros, never `1E-8`."""

    return format(amount.normalize(), "f")


def mention(user_id: str) -> str:
    return f"<@{user_id}>"


def help_text(bot_name: str) -> str:
    return HELP_TEXT.format(bot_name=bot_name)


def current_balance(balance: Decimal, unit: str, native: bool) -> str:
    if native:
        return f"Your current balance is {format_amount(balance)} {unit}."
    return f"You also have {format_amount(balance)} {unit}."


def account_created(address: str) -> str:
    return (
        f"I have created account with address: {address} for you.\n"
        "Please do not deposit large amounts, as it is not a secure wallet "
        "like the core client or mynxt wallets."
    )


def deposit_address(address: str) -> str:
    return f"You can deposit NXT here: {address}"


def not_enough_funds(balance: Decimal, unit: str) -> str:
    return f"Not enough {unit}. You only have {format_amount(balance)} {unit}."


def not_enough_funds_need_fee(balance: Decimal) -> str:
    return (
        f"Not enough NXT. You only have {format_amount(balance)} NXT "
        "and 1 NXT is reserved for the transaction fee."
    )


def unknown_unit(unit: str) -> str:
    return f"Unknown currency or asset {unit}"


def too_many_decimals(unit: str, decimals: int) -> str:
    if decimals == 0:
        return f"{unit} can only be sent in whole units."
    return f"{unit} supports at most {decimals} decimal places."


def withdraw(amount: Decimal, unit: str, transaction_id: str) -> str:
    return (
        f"{format_amount(amount)} {unit} was sent to the specified address, "
        f"({TRANSACTION_URL.format(transaction_id)})"
    )


def tip_received(sender_id: str) -> str:
    return (
        f"Hi, you received a tip from {mention(sender_id)}.\n"
        "So I have set up an account for you that you can use. "
        "Type *help* to get more information about what commands are available."
    )


def _with_comment(text: str, comment: Optional[str]) -> str:
    if comment:
        return f"{text} - {comment}"
    return text


def tip_sent_channel(
    sender_id: str,
    recipient_id: str,
    amount: Decimal,
    unit: str,
    transaction_id: str,
    comment: Optional[str] = None,
) -> str:
    text = (
        f"{mention(sender_id)} => {mention(recipient_id)} {format_amount(amount)} {unit} "
        f"({TRANSACTION_URL.format(transaction_id)})"
    )
    return _with_comment(text, comment)


def tip_to_address_sent_channel(
    sender_id: str,
    address: str,
    amount: Decimal,
    unit: str,
    transaction_id: str,
    comment: Optional[str] = None,
) -> str:
    text = (
        f"{mention(sender_id)} => {address} {format_amount(amount)} {unit} "
        f"({TRANSACTION_URL.format(transaction_id)})"
    )
    return _with_comment(text, comment)


def tip_transaction_message(sender_name: str, recipient_name: str, comment: Optional[str]) -> str:
    """Message attached to the ledger transaction itself."""

    text = f"{sender_name} => {recipient_name}"
    if comment:
        text = f"{text}: {comment}"
    return text


def asset_recipient_message(template: str, amount: Decimal, sender_id: str) -> str:
    return template.replace("{amount}", format_amount(amount)).replace("{sender}", mention(sender_id))
