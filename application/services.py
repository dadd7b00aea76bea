from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from application import messages
from application.parsing import ParsedCommand, mentioned_user_id
from application.verification import (
    RejectionReason,
    VerificationOutcome,
    verify,
    verify_fee_reserve,
)
from domain.models import NXT, Account, LedgerError, Transferable, TransferResult
from domain.registry import TransferableRegistry
from domain.repositories import AccountRepository, ChatTransport, LedgerClient

logger = logging.getLogger(__name__)

COMMENT_MAX_LENGTH = 512


@dataclass
class ChatUser:
    """
    The caller as seen by the application layer.

    The application layer never depends on concrete SDK types; the
    interface layer builds this small object from the platform user.
    """

    user_id: str
    name: str


def _validate_positive_amount(amount: Decimal) -> Optional[str]:
    if amount <= 0:
        return messages.INVALID_AMOUNT
    return None


class TransferOrchestrator:
    """
    Runs the private and channel commands against the ledger.

    Every operation resolves the caller's account, checks the request,
    moves funds through the `LedgerClient` and reports back through the
    `ChatTransport`. Repository calls are synchronous, so they are pushed
    to a worker thread to keep the event loop free for other users.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        account_repo: AccountRepository,
        transport: ChatTransport,
        registry: TransferableRegistry,
        bot_name: str = "tipbot",
    ) -> None:
        self._ledger = ledger
        self._account_repo = account_repo
        self._transport = transport
        self._registry = registry
        self._bot_name = bot_name

    async def help(self, session_id: str) -> None:
        await self._transport.send_message(session_id, messages.help_text(self._bot_name))

    async def unknown_command(self, session_id: str) -> None:
        await self._transport.send_message(session_id, messages.UNKNOWN_COMMAND)

    async def unknown_channel_command(self, session_id: str) -> None:
        await self._transport.send_message(session_id, messages.UNKNOWN_CHANNEL_COMMAND)

    async def balance(self, user: ChatUser, session_id: str) -> None:
        account = await self._get_account(user.user_id)
        if account is None:
            await self._transport.send_message(session_id, messages.NO_ACCOUNT)
            return

        lines = []
        for transferable in self._registry.all():
            balance = await self._get_balance(transferable, account.address)
            if balance > 0 or transferable.is_native:
                lines.append(
                    messages.current_balance(balance, transferable.name, transferable.is_native)
                )
        await self._transport.send_message(session_id, "\n".join(lines))

    async def deposit(self, user: ChatUser, session_id: str) -> None:
        account = await self._get_account(user.user_id)
        if account is None:
            account = await self._create_account(user.user_id)
            await self._transport.send_message(session_id, messages.account_created(account.address))
        else:
            await self._transport.send_message(session_id, messages.deposit_address(account.address))

    async def withdraw(self, user: ChatUser, session_id: str, command: ParsedCommand) -> None:
        account = await self._get_account(user.user_id)
        if account is None:
            await self._transport.send_message(session_id, messages.NO_ACCOUNT)
            return

        error = _validate_positive_amount(command.amount)
        if error:
            await self._transport.send_message(session_id, error)
            return

        transferable = self._registry.resolve(command.unit)
        if transferable is not None and not transferable.is_representable(command.amount):
            reply = messages.too_many_decimals(transferable.name, transferable.decimals)
            await self._transport.send_message(session_id, reply)
            return
        if not await self._verify(transferable, command.unit, account, session_id, command.amount):
            return

        result = await self._transfer(
            account,
            command.address,
            transferable,
            command.amount,
            messages.WITHDRAW_MESSAGE,
        )
        if not result.ok:
            await self._transport.send_message(session_id, messages.INVALID_ADDRESS)
            return

        await self._transport.send_message(
            session_id,
            messages.withdraw(command.amount, transferable.name, result.transaction_id),
            unfurl_links=False,
        )

    async def tip(self, user: ChatUser, session_id: str, command: ParsedCommand) -> None:
        """
        Tip a chat user or a bare NXT address from a channel.

        Recipients without an account get one created on the spot and
        are told about it privately before the transfer is made.
        """

        account = await self._get_account(user.user_id)
        if account is None:
            await self._transport.send_message(session_id, messages.NO_ACCOUNT_CHANNEL)
            return

        recipient_id = mentioned_user_id(command.recipient)
        recipient = recipient_id or command.recipient
        comment = command.comment or ""

        if recipient == self._transport.self_id:
            await self._transport.send_message(session_id, messages.CANT_TIP_BOT_CHANNEL)
            return
        if recipient == user.user_id:
            await self._transport.send_message(session_id, messages.CANT_TIP_YOURSELF_CHANNEL)
            return
        if recipient_id is None and not self._ledger.is_valid_address(recipient):
            await self._transport.send_message(session_id, messages.INVALID_ADDRESS)
            return
        if len(comment) > COMMENT_MAX_LENGTH:
            await self._transport.send_message(session_id, messages.COMMENT_TOO_LONG_CHANNEL)
            return

        error = _validate_positive_amount(command.amount)
        if error:
            await self._transport.send_message(session_id, error)
            return

        transferable = self._registry.resolve(command.unit)
        if transferable is not None and not transferable.is_representable(command.amount):
            reply = messages.too_many_decimals(transferable.name, transferable.decimals)
            await self._transport.send_message(session_id, reply)
            return
        if not await self._verify(transferable, command.unit, account, session_id, command.amount):
            return

        if recipient_id is not None:
            await self._tip_user(user, account, recipient_id, transferable, command.amount, comment, session_id)
        else:
            await self._tip_address(user, account, recipient, transferable, command.amount, comment, session_id)

    async def _tip_user(
        self,
        user: ChatUser,
        account: Account,
        recipient_id: str,
        transferable: Transferable,
        amount: Decimal,
        comment: str,
        session_id: str,
    ) -> None:
        # Unknown users must fail here, before any account is created.
        recipient_name = await self._transport.get_user_display_name(recipient_id)
        recipient_account = await self._get_account(recipient_id)
        recipient_public_key = None
        if recipient_account is None:
            recipient_account = await self._provision_recipient(user, recipient_id)
            recipient_public_key = recipient_account.public_key
            previous_balance: Optional[Decimal] = Decimal(0)
        else:
            previous_balance = await self._balance_before_asset_transfer(transferable, recipient_account)

        tx_message = messages.tip_transaction_message(user.name, recipient_name, comment)
        result = await self._transfer(
            account,
            recipient_account.address,
            transferable,
            amount,
            tx_message,
            recipient_public_key,
        )
        if not result.ok:
            await self._transport.send_message(session_id, messages.INVALID_ADDRESS)
            return

        reply = messages.tip_sent_channel(
            user.user_id, recipient_id, amount, transferable.name, result.transaction_id, comment
        )
        await self._transport.send_message(session_id, reply, unfurl_links=False)
        await self._send_asset_recipient_message(user, recipient_id, transferable, amount, previous_balance)

    async def _tip_address(
        self,
        user: ChatUser,
        account: Account,
        address: str,
        transferable: Transferable,
        amount: Decimal,
        comment: str,
        session_id: str,
    ) -> None:
        tx_message = messages.tip_transaction_message(user.name, "", comment)
        result = await self._transfer(account, address, transferable, amount, tx_message)
        if not result.ok:
            await self._transport.send_message(session_id, messages.INVALID_ADDRESS)
            return

        reply = messages.tip_to_address_sent_channel(
            user.user_id, address, amount, transferable.name, result.transaction_id, comment
        )
        await self._transport.send_message(session_id, reply, unfurl_links=False)

    async def _provision_recipient(self, sender: ChatUser, recipient_id: str) -> Account:
        private_session_id = await self._transport.get_private_session_id(recipient_id)
        account = await self._create_account(recipient_id)
        await self._transport.send_message(private_session_id, messages.tip_received(sender.user_id))
        return account

    async def _balance_before_asset_transfer(
        self,
        transferable: Transferable,
        recipient_account: Account,
    ) -> Optional[Decimal]:
        if not transferable.has_recipient_message():
            return None
        try:
            return await self._ledger.get_balance(transferable, recipient_account.address)
        except Exception:
            logger.warning(
                "Could not read %s balance of %s, skipping recipient message",
                transferable.name,
                recipient_account.address,
                exc_info=True,
            )
            return None

    async def _send_asset_recipient_message(
        self,
        sender: ChatUser,
        recipient_id: str,
        transferable: Transferable,
        amount: Decimal,
        previous_balance: Optional[Decimal],
    ) -> None:
        if not transferable.has_recipient_message() or previous_balance != 0:
            return
        try:
            private_session_id = await self._transport.get_private_session_id(recipient_id)
            text = messages.asset_recipient_message(transferable.recipient_message, amount, sender.user_id)
            await self._transport.send_message(private_session_id, text)
        except Exception:
            logger.warning(
                "Failed to send %s recipient message to %s",
                transferable.name,
                recipient_id,
                exc_info=True,
            )

    async def _verify(
        self,
        transferable: Optional[Transferable],
        unit: str,
        account: Account,
        session_id: str,
        amount: Decimal,
    ) -> bool:
        if transferable is None:
            outcome = verify(None, amount, Decimal(0))
        else:
            native_balance = await self._get_balance(NXT, account.address)
            outcome = verify_fee_reserve(transferable, amount, native_balance)
            if outcome.proceed and not transferable.is_native:
                balance = await self._get_balance(transferable, account.address)
                outcome = verify(transferable, amount, native_balance, balance)

        if outcome.proceed:
            return True

        await self._transport.send_message(session_id, self._rejection_text(outcome, transferable, unit))
        return False

    @staticmethod
    def _rejection_text(
        outcome: VerificationOutcome,
        transferable: Optional[Transferable],
        unit: str,
    ) -> str:
        if outcome.reason is RejectionReason.UNKNOWN_UNIT:
            return messages.unknown_unit(unit)
        if outcome.reason is RejectionReason.INSUFFICIENT_FUNDS_NEED_FEE:
            return messages.not_enough_funds_need_fee(outcome.balance)
        return messages.not_enough_funds(outcome.balance, transferable.name)

    async def _get_account(self, user_id: str) -> Optional[Account]:
        return await asyncio.to_thread(self._account_repo.get_account, user_id)

    async def _create_account(self, user_id: str) -> Account:
        account = self._ledger.create_account(user_id)
        await asyncio.to_thread(self._account_repo.add_account, account)
        logger.info("Created account %s for user %s", account.address, user_id)
        return account

    async def _get_balance(self, transferable: Transferable, address: str) -> Decimal:
        try:
            return await self._ledger.get_balance(transferable, address)
        except LedgerError:
            logger.exception("Failed to read %s balance of %s", transferable.name, address)
            raise

    async def _transfer(
        self,
        account: Account,
        address: str,
        transferable: Transferable,
        amount: Decimal,
        message: str,
        recipient_public_key: Optional[str] = None,
    ) -> TransferResult:
        try:
            result = await self._ledger.transfer(
                account, address, transferable, amount, message, recipient_public_key
            )
        except LedgerError:
            logger.exception(
                "Transfer of %s %s from %s to %s failed",
                amount,
                transferable.name,
                account.address,
                address,
            )
            raise

        if result.ok:
            logger.info(
                "Sent %s %s from %s to %s (transaction %s)",
                amount,
                transferable.name,
                account.address,
                address,
                result.transaction_id,
            )
        return result
