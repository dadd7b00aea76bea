from __future__ import annotations

from application.parsing import CommandKind, parse_channel_command, parse_private_command
from application.services import ChatUser, TransferOrchestrator
from domain.registry import TransferableRegistry


class CommandDispatcher:
    """
    Entry point for raw chat events.

    Interface layers hand over the message text, the caller and the
    session the message came from; parsing and routing happen here.
    """

    def __init__(
        self,
        orchestrator: TransferOrchestrator,
        registry: TransferableRegistry,
        bot_name: str = "tipbot",
    ) -> None:
        self._orchestrator = orchestrator
        self._registry = registry
        self.bot_name = bot_name

    async def instant_message_command(self, text: str, user: ChatUser, session_id: str) -> None:
        command = parse_private_command(text, self._registry)

        if command.kind is CommandKind.HELP:
            await self._orchestrator.help(session_id)
        elif command.kind is CommandKind.BALANCE:
            await self._orchestrator.balance(user, session_id)
        elif command.kind is CommandKind.DEPOSIT:
            await self._orchestrator.deposit(user, session_id)
        elif command.kind is CommandKind.WITHDRAW:
            await self._orchestrator.withdraw(user, session_id, command)
        else:
            await self._orchestrator.unknown_command(session_id)

    async def channel_command(self, text: str, user: ChatUser, session_id: str) -> None:
        command = parse_channel_command(text, self.bot_name, self._registry)

        if command.kind is CommandKind.TIP:
            await self._orchestrator.tip(user, session_id, command)
        else:
            await self._orchestrator.unknown_channel_command(session_id)
