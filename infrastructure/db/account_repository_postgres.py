from __future__ import annotations

from typing import Optional

import psycopg2

from domain.models import Account
from domain.repositories import AccountRepository


class PostgresAccountRepository(AccountRepository):
    """
    Postgres-backed implementation of `AccountRepository`.

    Uses the same `wallet_accounts` layout as the SQLite repository so a
    deployment can move between the two without reshaping data.
    """

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._ensure_table()

    def _get_connection(self):
        return psycopg2.connect(self._dsn)

    def _ensure_table(self) -> None:
        with self._get_connection() as conn:
            with conn.cursor() as cur:
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
    def _to_domain(row: tuple) -> Account:
        return Account(
            user_id=str(row[0]),
            address=row[1],
            secret_phrase=row[2],
            public_key=row[3],
        )

    def get_account(self, user_id: str) -> Optional[Account]:
        with self._get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT user_id, address, secret_phrase, public_key
                    FROM wallet_accounts
                    WHERE user_id = %s
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
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO wallet_accounts (user_id, address, secret_phrase, public_key)
                    VALUES (%s, %s, %s, %s)
                    """,
                    (account.user_id, account.address, account.secret_phrase, account.public_key),
                )
                conn.commit()

    def update_account(self, account: Account) -> None:
        if not account.address:
            raise ValueError(f"Account of user {account.user_id} has no address")
        with self._get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE wallet_accounts
                    SET address = %s, secret_phrase = %s, public_key = %s
                    WHERE user_id = %s
                    """,
                    (account.address, account.secret_phrase, account.public_key, account.user_id),
                )
                conn.commit()
