import unittest
from decimal import Decimal
from unittest.mock import AsyncMock

from domain.models import NXT, Account, LedgerError, Transferable, TransferableKind
from infrastructure.ledger import reed_solomon
from infrastructure.ledger.nxt_client import (
    NxtLedgerClient,
    account_id_from_public_key,
    derive_public_key,
)

ASSET = Transferable(kind=TransferableKind.ASSET, name="GOLD", decimals=4, ledger_id="555")
CURRENCY = Transferable(kind=TransferableKind.CURRENCY, name="COIN", decimals=2, ledger_id="777")


class NxtLedgerClientTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.client = NxtLedgerClient("http://node.invalid/nxt")
        self.client._request = AsyncMock(return_value={"transaction": "123"})
        self.sender = self.client.create_account("U1")
        self.recipient = reed_solomon.encode(987654321)

    def test_create_account_derives_address_from_secret(self):
        account = self.client.create_account("U9")

        self.assertEqual(account.user_id, "U9")
        self.assertTrue(self.client.is_valid_address(account.address))
        public_key = derive_public_key(account.secret_phrase)
        self.assertEqual(account.public_key, public_key.hex())
        self.assertEqual(len(public_key), 32)
        self.assertEqual(reed_solomon.decode(account.address), account_id_from_public_key(public_key))

    def test_create_account_uses_fresh_secrets(self):
        first = self.client.create_account("U9")
        second = self.client.create_account("U9")
        self.assertNotEqual(first.secret_phrase, second.secret_phrase)
        self.assertNotEqual(first.address, second.address)

    async def test_send_money(self):
        result = await self.client.transfer(self.sender, self.recipient, NXT, Decimal("12.5"), "hi")

        self.assertTrue(result.ok)
        self.assertEqual(result.transaction_id, "123")
        request_type, params = self.client._request.call_args.args
        self.assertEqual(request_type, "sendMoney")
        self.assertEqual(params["amountNQT"], 1250000000)
        self.assertEqual(params["recipient"], self.recipient)
        self.assertEqual(params["secretPhrase"], self.sender.secret_phrase)
        self.assertEqual(params["feeNQT"], 100000000)
        self.assertEqual(params["message"], "hi")
        self.assertIsNone(params["recipientPublicKey"])

    async def test_transfer_asset_quantity(self):
        await self.client.transfer(self.sender, self.recipient, ASSET, Decimal("1.123"), "TEST", "abcd")

        request_type, params = self.client._request.call_args.args
        self.assertEqual(request_type, "transferAsset")
        self.assertEqual(params["asset"], "555")
        self.assertEqual(params["quantityQNT"], 11230)
        self.assertEqual(params["recipientPublicKey"], "abcd")

    async def test_transfer_currency_units(self):
        await self.client.transfer(self.sender, self.recipient, CURRENCY, Decimal("1.230"), "TEST")

        request_type, params = self.client._request.call_args.args
        self.assertEqual(request_type, "transferCurrency")
        self.assertEqual(params["currency"], "777")
        self.assertEqual(params["units"], 123)

    async def test_transfer_rejects_extra_precision(self):
        for transferable, amount in ((CURRENCY, "1.239"), (NXT, "0.000000009")):
            with self.assertRaises(LedgerError):
                await self.client.transfer(self.sender, self.recipient, transferable, Decimal(amount), "TEST")
        self.client._request.assert_not_called()

    async def test_invalid_address_is_not_sent(self):
        result = await self.client.transfer(self.sender, "NXT-NOPE", NXT, Decimal("1"), "x")

        self.assertTrue(result.invalid_address)
        self.client._request.assert_not_called()

    async def test_node_recipient_rejection_maps_to_invalid_address(self):
        self.client._request.side_effect = LedgerError('Incorrect "recipient"', error_code=4)

        result = await self.client.transfer(self.sender, self.recipient, NXT, Decimal("1"), "x")

        self.assertTrue(result.invalid_address)
        self.assertFalse(result.ok)

    async def test_other_node_errors_raise(self):
        self.client._request.side_effect = LedgerError("Not enough funds", error_code=6)

        with self.assertRaises(LedgerError) as ctx:
            await self.client.transfer(self.sender, self.recipient, NXT, Decimal("1"), "x")
        self.assertEqual(ctx.exception.error_code, 6)

    async def test_transfer_requires_secret_phrase(self):
        account = Account(user_id="U1", address=self.sender.address)

        with self.assertRaises(LedgerError):
            await self.client.transfer(account, self.recipient, NXT, Decimal("1"), "x")

    async def test_native_balance(self):
        self.client._request.return_value = {"unconfirmedBalanceNQT": "250000000"}

        balance = await self.client.get_balance(NXT, self.recipient)

        self.assertEqual(balance, Decimal("2.5"))
        self.client._request.assert_awaited_with("getBalance", {"account": self.recipient})

    async def test_asset_balance(self):
        self.client._request.return_value = {"asset": "555", "unconfirmedQuantityQNT": "15000"}
        self.assertEqual(await self.client.get_balance(ASSET, self.recipient), Decimal("1.5"))

    async def test_missing_holding_is_zero(self):
        self.client._request.return_value = {}
        self.assertEqual(await self.client.get_balance(ASSET, self.recipient), Decimal(0))

    async def test_currency_balance_from_list_reply(self):
        self.client._request.return_value = {
            "accountCurrencies": [
                {"currency": "1", "unconfirmedUnits": "999"},
                {"currency": "777", "unconfirmedUnits": "250"},
            ]
        }
        self.assertEqual(await self.client.get_balance(CURRENCY, self.recipient), Decimal("2.5"))


if __name__ == "__main__":
    unittest.main()
