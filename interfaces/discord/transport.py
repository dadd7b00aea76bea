from __future__ import annotations

import discord

from domain.repositories import ChatTransport


class DiscordTransport(ChatTransport):
    """
    `ChatTransport` on top of a connected `discord.Client`.

    Session IDs are Discord channel IDs, DM channels included.
    """

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    @property
    def self_id(self) -> str:
        if self._client.user is None:
            return ""
        return str(self._client.user.id)

    async def send_message(self, session_id: str, text: str, unfurl_links: bool = True) -> None:
        channel_id = int(session_id)
        channel = self._client.get_channel(channel_id)
        if channel is None:
            channel = await self._client.fetch_channel(channel_id)
        await channel.send(text, suppress_embeds=not unfurl_links)

    async def _get_user(self, user_id: str) -> discord.User:
        user = self._client.get_user(int(user_id))
        if user is None:
            user = await self._client.fetch_user(int(user_id))
        return user

    async def get_user_display_name(self, user_id: str) -> str:
        user = await self._get_user(user_id)
        return user.display_name or user.name

    async def get_private_session_id(self, user_id: str) -> str:
        user = await self._get_user(user_id)
        channel = user.dm_channel or await user.create_dm()
        return str(channel.id)
