from __future__ import annotations

import logging
from typing import Optional

import discord

from application import messages
from application.dispatcher import CommandDispatcher
from application.services import ChatUser, TransferOrchestrator
from domain.registry import TransferableRegistry
from domain.repositories import AccountRepository, LedgerClient
from interfaces.discord.transport import DiscordTransport

logger = logging.getLogger(__name__)


def _build_chat_user(user: discord.abc.User) -> ChatUser:
    """Create a `ChatUser` from a Discord user."""

    return ChatUser(user_id=str(user.id), name=user.display_name or user.name)


def normalize_bot_mention(content: str, bot_id: Optional[int], bot_name: str) -> str:
    """
    Replace a leading `@bot` mention with the bot's command name so that
    `@tipbot tip ...` and `tipbot tip ...` parse the same way.
    """

    text = (content or "").strip()
    if bot_id is None:
        return text
    for mention in (f"<@{bot_id}>", f"<@!{bot_id}>"):
        if text.startswith(mention):
            return bot_name + text[len(mention):]
    return text


def is_addressed_to_bot(text: str, bot_name: str) -> bool:
    words = text.split(maxsplit=1)
    return bool(words) and words[0].lower() == bot_name.lower()


def create_discord_bot(
    ledger: LedgerClient,
    account_repo: AccountRepository,
    registry: TransferableRegistry,
    bot_name: str = "tipbot",
) -> discord.Client:
    """
    Configure and return a Discord client wired to the application layer.

    Direct messages take the private commands (help, balance, deposit,
    withdraw); channel messages starting with the bot's name or a
    mention of it take the tip command. Everything else is ignored.
    """

    intents = discord.Intents.default()
    intents.message_content = True
    intents.dm_messages = True

    client = discord.Client(intents=intents)
    transport = DiscordTransport(client)
    orchestrator = TransferOrchestrator(ledger, account_repo, transport, registry, bot_name)
    dispatcher = CommandDispatcher(orchestrator, registry, bot_name)

    @client.event
    async def on_ready():
        logger.info("Discord bot logged in as %s (id=%s)", client.user, client.user.id)

    @client.event
    async def on_message(message: discord.Message):
        # Ignore other bots, including ourselves.
        if message.author.bot:
            return

        user = _build_chat_user(message.author)
        session_id = str(message.channel.id)

        try:
            if isinstance(message.channel, discord.DMChannel):
                await dispatcher.instant_message_command(message.content, user, session_id)
                return

            bot_id = client.user.id if client.user else None
            text = normalize_bot_mention(message.content, bot_id, bot_name)
            if not is_addressed_to_bot(text, bot_name):
                return
            await dispatcher.channel_command(text, user, session_id)
        except Exception:
            logger.exception("Command from user %s in %s failed", user.user_id, session_id)
            await message.channel.send(messages.GENERIC_ERROR)

    return client
