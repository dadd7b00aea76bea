import os
import tempfile
import unittest
from unittest import mock

from domain.models import Account
from infrastructure.db.account_repository_postgres import PostgresAccountRepository
from infrastructure.db.account_repository_sqlite import SqliteAccountRepository


class SqliteAccountRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = SqliteAccountRepository(os.path.join(self._tmp.name, "tipbot.db"))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_add_and_get(self):
        account = Account(user_id="U1", address="NXT-AAAA", secret_phrase="s", public_key="pk")
        self.repo.add_account(account)

        self.assertEqual(self.repo.get_account("U1"), account)

    def test_missing_account(self):
        self.assertIsNone(self.repo.get_account("nobody"))

    def test_update_account(self):
        self.repo.add_account(Account(user_id="U1", address="NXT-AAAA"))
        self.repo.update_account(Account(user_id="U1", address="NXT-BBBB", secret_phrase="s2", public_key="pk2"))

        stored = self.repo.get_account("U1")
        self.assertEqual(stored.address, "NXT-BBBB")
        self.assertEqual(stored.secret_phrase, "s2")
        self.assertEqual(stored.public_key, "pk2")

    def test_account_needs_address(self):
        with self.assertRaises(ValueError):
            self.repo.add_account(Account(user_id="U1", address=""))
        self.assertIsNone(self.repo.get_account("U1"))

    def test_table_survives_reopen(self):
        self.repo.add_account(Account(user_id="U1", address="NXT-AAAA"))
        reopened = SqliteAccountRepository(os.path.join(self._tmp.name, "tipbot.db"))
        self.assertEqual(reopened.get_account("U1").address, "NXT-AAAA")


class PostgresAccountRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("infrastructure.db.account_repository_postgres.psycopg2.connect")
        self.connect = patcher.start()
        self.addCleanup(patcher.stop)

        self.conn = self.connect.return_value
        self.conn.__enter__.return_value = self.conn
        self.cursor = self.conn.cursor.return_value.__enter__.return_value
        self.repo = PostgresAccountRepository("postgresql://tipbot@localhost/tipbot")

    def test_creates_table_on_start(self):
        self.connect.assert_called_with("postgresql://tipbot@localhost/tipbot")
        self.assertIn("CREATE TABLE IF NOT EXISTS wallet_accounts", self.cursor.execute.call_args_list[0].args[0])

    def test_get_account_maps_row(self):
        self.cursor.fetchone.return_value = ("U1", "NXT-AAAA", "s", "pk")

        account = self.repo.get_account("U1")

        self.assertEqual(account, Account(user_id="U1", address="NXT-AAAA", secret_phrase="s", public_key="pk"))
        self.assertEqual(self.cursor.execute.call_args.args[1], ("U1",))

    def test_get_missing_account(self):
        self.cursor.fetchone.return_value = None
        self.assertIsNone(self.repo.get_account("U1"))

    def test_add_account_inserts_row(self):
        self.repo.add_account(Account(user_id="U1", address="NXT-AAAA", secret_phrase="s", public_key="pk"))

        sql, params = self.cursor.execute.call_args.args
        self.assertIn("INSERT INTO wallet_accounts", sql)
        self.assertEqual(params, ("U1", "NXT-AAAA", "s", "pk"))

    def test_update_account(self):
        self.repo.update_account(Account(user_id="U1", address="NXT-BBBB"))

        sql, params = self.cursor.execute.call_args.args
        self.assertIn("UPDATE wallet_accounts", sql)
        self.assertEqual(params, ("NXT-BBBB", None, None, "U1"))


if __name__ == "__main__":
    unittest.main()
