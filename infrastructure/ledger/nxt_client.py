from __future__ import annotations

import asyncio
import hashlib
import logging
import secrets
from decimal import Decimal
from typing import Any, Dict, Optional

import aiohttp
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from domain.models import Account, LedgerError, Transferable, TransferableKind, TransferResult
from domain.repositories import LedgerClient
from infrastructure.ledger import reed_solomon

logger = logging.getLogger(__name__)

ONE_NXT_NQT = 100_000_000

# NXT answers a malformed or unknown recipient with this error code.
INCORRECT_PARAMETER = 4


def derive_public_key(secret_phrase: str) -> bytes:
    """Curve25519 public key of an NXT secret phrase."""

    private_key = hashlib.sha256(secret_phrase.encode("utf-8")).digest()
    return X25519PrivateKey.from_private_bytes(private_key).public_key().public_bytes(
        Encoding.Raw, PublicFormat.Raw
    )


def account_id_from_public_key(public_key: bytes) -> int:
    digest = hashlib.sha256(public_key).digest()
    return int.from_bytes(digest[:8], "little")


class NxtLedgerClient(LedgerClient):
    """
    `LedgerClient` talking to an NXT node over its HTTP API.

    Transactions are created with `secretPhrase`, so the node does the
    signing. Accounts are derived locally from a fresh secret phrase.
    """

    def __init__(
        self,
        server_url: str,
        *,
        timeout: float = 30,
        fee_nqt: int = ONE_NXT_NQT,
        deadline: int = 1440,
    ) -> None:
        self._server_url = server_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._fee_nqt = fee_nqt
        self._deadline = deadline

    async def _request(self, request_type: str, params: Dict[str, Any]) -> Dict[str, Any]:
        data = {"requestType": request_type}
        data.update({k: str(v) for k, v in params.items() if v is not None})

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(self._server_url, data=data) as resp:
                    resp.raise_for_status()
                    reply = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise LedgerError(f"{request_type} request failed: {exc}") from exc

        if not isinstance(reply, dict):
            raise LedgerError(f"{request_type} returned an unexpected reply")
        if "errorCode" in reply:
            raise LedgerError(
                reply.get("errorDescription") or f"{request_type} failed",
                error_code=int(reply["errorCode"]),
            )
        return reply

    @staticmethod
    def _to_quantity(amount: Decimal, transferable: Transferable) -> int:
        if not transferable.is_representable(amount):
            raise LedgerError(
                f"{amount:f} {transferable.name} has more than {transferable.decimals} decimal places"
            )
        return int(amount * transferable.factor)

    @staticmethod
    def _from_quantity(quantity: Any, transferable: Transferable) -> Decimal:
        if quantity in (None, ""):
            return Decimal(0)
        return Decimal(str(quantity)) / transferable.factor

    @staticmethod
    def _holding(reply: Dict[str, Any], list_key: str, id_key: str, ledger_id: str) -> Dict[str, Any]:
        # With a holding filter the node answers with the entry itself (or
        # `{}`); older nodes still wrap it in a list.
        if list_key not in reply:
            return reply
        for entry in reply[list_key]:
            if str(entry.get(id_key)) == str(ledger_id):
                return entry
        return {}

    async def get_balance(self, transferable: Transferable, address: str) -> Decimal:
        if transferable.kind is TransferableKind.NXT:
            reply = await self._request("getBalance", {"account": address})
            return self._from_quantity(reply.get("unconfirmedBalanceNQT"), transferable)

        if transferable.kind is TransferableKind.CURRENCY:
            reply = await self._request(
                "getAccountCurrencies",
                {"account": address, "currency": transferable.ledger_id},
            )
            holding = self._holding(reply, "accountCurrencies", "currency", transferable.ledger_id)
            return self._from_quantity(holding.get("unconfirmedUnits"), transferable)

        if transferable.kind is TransferableKind.ASSET:
            reply = await self._request(
                "getAccountAssets",
                {"account": address, "asset": transferable.ledger_id},
            )
            holding = self._holding(reply, "accountAssets", "asset", transferable.ledger_id)
            return self._from_quantity(holding.get("unconfirmedQuantityQNT"), transferable)

        raise ValueError(f"Unsupported transferable kind: {transferable.kind}")

    async def transfer(
        self,
        account: Account,
        address: str,
        transferable: Transferable,
        amount: Decimal,
        message: str,
        recipient_public_key: Optional[str] = None,
    ) -> TransferResult:
        if not self.is_valid_address(address):
            return TransferResult.rejected_address()
        if not account.secret_phrase:
            raise LedgerError(f"Account {account.address} has no secret phrase")

        params: Dict[str, Any] = {
            "recipient": address,
            "secretPhrase": account.secret_phrase,
            "feeNQT": self._fee_nqt,
            "deadline": self._deadline,
            "message": message,
            "messageIsText": "true",
            "recipientPublicKey": recipient_public_key or None,
        }
        quantity = self._to_quantity(amount, transferable)

        if transferable.kind is TransferableKind.NXT:
            request_type = "sendMoney"
            params["amountNQT"] = quantity
        elif transferable.kind is TransferableKind.CURRENCY:
            request_type = "transferCurrency"
            params["currency"] = transferable.ledger_id
            params["units"] = quantity
        elif transferable.kind is TransferableKind.ASSET:
            request_type = "transferAsset"
            params["asset"] = transferable.ledger_id
            params["quantityQNT"] = quantity
        else:
            raise ValueError(f"Unsupported transferable kind: {transferable.kind}")

        try:
            reply = await self._request(request_type, params)
        except LedgerError as exc:
            if exc.error_code == INCORRECT_PARAMETER and "recipient" in str(exc).lower():
                logger.info("Node rejected recipient %s: %s", address, exc)
                return TransferResult.rejected_address()
            raise

        transaction_id = reply.get("transaction")
        if not transaction_id:
            raise LedgerError(f"{request_type} did not return a transaction id")
        return TransferResult.success(str(transaction_id))

    def is_valid_address(self, address: str) -> bool:
        return reed_solomon.is_valid(address)

    def create_account(self, user_id: str) -> Account:
        secret_phrase = secrets.token_hex(32)
        public_key = derive_public_key(secret_phrase)
        address = reed_solomon.encode(account_id_from_public_key(public_key))
        return Account(
            user_id=user_id,
            address=address,
            secret_phrase=secret_phrase,
            public_key=public_key.hex(),
        )
