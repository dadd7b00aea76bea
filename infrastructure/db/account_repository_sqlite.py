from __future__ import annotations

import sqlite3
from typing import Optional

from domain.models import Account
from domain.repositories import AccountRepository


class SqliteAccountRepository(AccountRepository):
    """
    SQLite-backed implementation of `AccountRepository`.

    Manages the `wallet_accounts` table, which stores the NXT address and
    credentials of every chat user that has an account. It is
    self-initialising: the table is created if needed.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._ensure_table()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_table(self) -> None:
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS wallet_accounts (
                    user_id TEXT PRIMARY KEY,
                    address TEXT NOT NULL,
                    secret_phrase TEXT,
                    public_key TEXT
                )
                """
            )
            conn.commit()

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> Account:
        return Account(
            user_id=str(row[0]),
            address=row[1],
            secret_phrase=row[2],
            public_key=row[3],
        )

    def get_account(self, user_id: str) -> Optional[Account]:
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT user_id, address, secret_phrase, public_key
                FROM wallet_accounts
                WHERE user_id = ?
                """,
                (user_id,),
            )
            row = cur.fetchone()
            if not row:
                return None
            return self._to_domain(row)

    def add_account(self, account: Account) -> None:
        if not account.address:
            raise ValueError(f"Account of user {account.user_id} has no address")
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO wallet_accounts (user_id, address, secret_phrase, public_key)
                VALUES (?, ?, ?, ?)
                """,
                (account.user_id, account.address, account.secret_phrase, account.public_key),
            )
            conn.commit()

    def update_account(self, account: Account) -> None:
        if not account.address:
            raise ValueError(f"Account of user {account.user_id} has no address")
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE wallet_accounts
                SET address = ?, secret_phrase = ?, public_key = ?
                WHERE user_id = ?
                """,
                (account.address, account.secret_phrase, account.public_key, account.user_id),
            )
            conn.commit()
