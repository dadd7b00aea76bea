from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from domain.models import Transferable, TransferableKind
from domain.registry import TransferableRegistry

logger = logging.getLogger(__name__)


def _build(entry: Dict[str, Any], kind: TransferableKind) -> Transferable:
    try:
        ledger_id = str(entry["id"])
        name = str(entry["name"]).strip()
    except KeyError as exc:
        raise ValueError(f"{kind.value} entry is missing {exc}: {entry}") from exc
    if not name:
        raise ValueError(f"{kind.value} {ledger_id} has an empty name")

    recipient_message = None
    if kind is TransferableKind.ASSET:
        recipient_message = entry.get("recipientMessage") or None

    try:
        decimals = int(entry["decimals"])
    except KeyError as exc:
        raise ValueError(f"{kind.value} {name} is missing 'decimals'") from exc
    if decimals < 0:
        raise ValueError(f"{kind.value} {name} has negative decimals: {decimals}")

    return Transferable(
        kind=kind,
        name=name,
        decimals=decimals,
        ledger_id=ledger_id,
        recipient_message=recipient_message,
    )


def parse_transferables(config: Dict[str, Any]) -> List[Transferable]:
    """
    Turn the `currencies` and `assets` sections of the config into
    transferables, currencies first.
    """

    transferables = [_build(e, TransferableKind.CURRENCY) for e in config.get("currencies", [])]
    transferables += [_build(e, TransferableKind.ASSET) for e in config.get("assets", [])]
    return transferables


def load_transferables(path: str, registry: TransferableRegistry) -> None:
    """Register every transferable listed in the JSON file at `path`."""

    with open(path, encoding="utf-8") as fh:
        config = json.load(fh)

    for transferable in parse_transferables(config):
        registry.register(transferable)
        logger.info(
            "Registered %s %s (id %s, %d decimals)",
            transferable.kind.value,
            transferable.name,
            transferable.ledger_id,
            transferable.decimals,
        )
