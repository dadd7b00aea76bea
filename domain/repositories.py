from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from .models import Account, Transferable, TransferResult


class AccountRepository(Protocol):
    """
    Abstraction over wallet account persistence.

    Implementations are responsible for:
    - Mapping between database rows and the `Account` domain model.
    - Hiding any SQL / driver details from the application layer.
    """

    def get_account(self, user_id: str) -> Optional[Account]:
        """Return the account owned by the given chat user, or None if not found."""

        ...

    def add_account(self, account: Account) -> None:
        """Persist a new account."""

        ...

    def update_account(self, account: Account) -> None:
        """Overwrite the stored address and credentials of an existing account."""

        ...


class LedgerClient(Protocol):
    """
    Gateway to the ledger node.

    Balance and transfer calls are coroutines since they go over the
    network; address validation and account creation are local.
    """

    async def get_balance(self, transferable: Transferable, address: str) -> Decimal:
        ...

    async def transfer(
        self,
        account: Account,
        address: str,
        transferable: Transferable,
        amount: Decimal,
        message: str,
        recipient_public_key: Optional[str] = None,
    ) -> TransferResult:
        """
        Send `amount` of `transferable` from `account` to `address`.

        Address format rejections come back as
        `TransferResult.rejected_address()`; any other failure raises
        `LedgerError`.
        """

        ...

    def is_valid_address(self, address: str) -> bool:
        ...

    def create_account(self, user_id: str) -> Account:
        """Generate fresh credentials for `user_id` without persisting them."""

        ...


class ChatTransport(Protocol):
    """
    The messaging platform as seen by the application layer.

    Session IDs identify a channel or a private conversation.
    """

    @property
    def self_id(self) -> str:
        ...

    async def send_message(
        self,
        session_id: str,
        text: str,
        unfurl_links: bool = True,
    ) -> None:
        ...

    async def get_user_display_name(self, user_id: str) -> str:
        ...

    async def get_private_session_id(self, user_id: str) -> str:
        ...
