from __future__ import annotations

from typing import List, Optional

from .models import NXT, Transferable


class DuplicateUnitError(ValueError):
    """Raised when a transferable name is already taken."""


class TransferableRegistry:
    """
    Known transferables, looked up by case-insensitive name.

    NXT is always the first entry. Registration only happens at startup,
    so reads need no locking.
    """

    def __init__(self) -> None:
        self._transferables: List[Transferable] = [NXT]

    @property
    def native(self) -> Transferable:
        return self._transferables[0]

    def register(self, transferable: Transferable) -> None:
        if self.resolve(transferable.name) is not None:
            raise DuplicateUnitError(
                f"Name of transferable must be unique, {transferable.name} was already added."
            )
        self._transferables.append(transferable)

    def resolve(self, name: str) -> Optional[Transferable]:
        wanted = (name or "").casefold()
        for transferable in self._transferables:
            if transferable.name.casefold() == wanted:
                return transferable
        return None

    def all(self) -> List[Transferable]:
        return list(self._transferables)
