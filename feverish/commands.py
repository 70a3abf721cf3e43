"""A queue of discovery database commands with shorthand writers."""

from __future__ import annotations

from .discovery import (
    ClearKind,
    DiscoveryDbSnapshot,
    DiscoveryEntry,
    DiscoveryInteraction,
    DiscoveryKind,
    RecordInteraction,
    Remove,
    ReplaceAll,
    SetSeen,
    Upsert,
)


class DiscoveryCommands:
    """Collects discovery commands until they are drained."""

    def __init__(self) -> None:
        self._pending: list = []

    def __len__(self) -> int:
        return len(self._pending)

    def _write(self, message: object) -> None:
        self._pending.append(message)

    def upsert(self, kind: DiscoveryKind, entry: DiscoveryEntry) -> None:
        self._write(Upsert(kind, entry))

    def upsert_item(self, entry: DiscoveryEntry) -> None:
        self.upsert(DiscoveryKind.ITEM, entry)

    def upsert_npc(self, entry: DiscoveryEntry) -> None:
        self.upsert(DiscoveryKind.NPC, entry)

    def remove(self, kind: DiscoveryKind, entry_id: str) -> None:
        self._write(Remove(kind, entry_id))

    def remove_item(self, entry_id: str) -> None:
        self.remove(DiscoveryKind.ITEM, entry_id)

    def remove_npc(self, entry_id: str) -> None:
        self.remove(DiscoveryKind.NPC, entry_id)

    def set_seen(self, kind: DiscoveryKind, entry_id: str, seen: bool) -> None:
        self._write(SetSeen(kind, entry_id, seen))

    def set_item_seen(self, entry_id: str, seen: bool) -> None:
        self.set_seen(DiscoveryKind.ITEM, entry_id, seen)

    def set_npc_seen(self, entry_id: str, seen: bool) -> None:
        self.set_seen(DiscoveryKind.NPC, entry_id, seen)

    def clear_items(self) -> None:
        self._write(ClearKind(DiscoveryKind.ITEM))

    def clear_npcs(self) -> None:
        self._write(ClearKind(DiscoveryKind.NPC))

    def record_interaction(self, interaction: DiscoveryInteraction) -> None:
        self._write(RecordInteraction(interaction))

    def replace_db(self, snapshot: DiscoveryDbSnapshot) -> None:
        self._write(ReplaceAll(snapshot))

    def drain(self) -> list:
        """Return the queued commands in order and empty the queue."""
        pending, self._pending = self._pending, []
        return pending