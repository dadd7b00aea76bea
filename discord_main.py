import logging

from dotenv import load_dotenv

from domain.registry import TransferableRegistry
from infrastructure.config import load_settings
from infrastructure.logging_config import setup_logging
from infrastructure.ledger.nxt_client import NxtLedgerClient
from infrastructure.transferables import load_transferables
from interfaces.discord.handlers import create_discord_bot


load_dotenv()

logger = logging.getLogger(__name__)


def _build_account_repository(settings):
    if settings.uses_postgres:
        from infrastructure.db.account_repository_postgres import PostgresAccountRepository

        return PostgresAccountRepository(settings.database_url)

    from infrastructure.db.account_repository_sqlite import SqliteAccountRepository

    return SqliteAccountRepository(settings.db_path)


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    registry = TransferableRegistry()
    if settings.transferables_path:
        load_transferables(settings.transferables_path, registry)

    account_repo = _build_account_repository(settings)
    ledger = NxtLedgerClient(settings.nxt_server_url, timeout=settings.nxt_timeout)

    bot = create_discord_bot(ledger, account_repo, registry, settings.bot_name)
    logger.info("Starting %s against %s", settings.bot_name, settings.nxt_server_url)
    bot.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
