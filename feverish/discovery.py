"""Discovered items, NPCs, interaction history and the commands that edit them."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class DiscoveryKind(Enum):
    ITEM = "item"
    NPC = "npc"


class DiscoveryInteractionAction(Enum):
    COLLECTED = "collected"
    INSPECTED = "inspected"
    SHARED = "shared"
    STATUS_CHANGED = "status_changed"


@dataclass(frozen=True)
class DiscoveryInteractionActor:
    """Who performed an interaction: the player, a named speaker or the system."""

    kind: str
    name: Optional[str] = None

    @classmethod
    def player(cls) -> DiscoveryInteractionActor:
        return cls("player")

    @classmethod
    def speaker(cls, name: str) -> DiscoveryInteractionActor:
        return cls("speaker", name)

    @classmethod
    def system(cls) -> DiscoveryInteractionActor:
        return cls("system")

    def to_data(self) -> Any:
        return {"speaker": self.name} if self.kind == "speaker" else self.kind

    @classmethod
    def from_data(cls, data: Any) -> DiscoveryInteractionActor:
        if data in ("player", "system"):
            return cls(data)
        if isinstance(data, dict) and list(data) == ["speaker"] and isinstance(data["speaker"], str):
            return cls.speaker(data["speaker"])
        raise ValueError(f"unknown interaction actor {data!r}")


@dataclass
class DiscoveryEntry:
    id: str = ""
    title: str = ""
    subtitle: str = ""
    description: str = ""
    image_path: Optional[str] = None
    model_path: Optional[str] = None
    seen: bool = False

    def with_subtitle(self, subtitle: str) -> DiscoveryEntry:
        return dataclasses.replace(self, subtitle=subtitle)

    def with_description(self, description: str) -> DiscoveryEntry:
        return dataclasses.replace(self, description=description)

    def with_image_path(self, path: str) -> DiscoveryEntry:
        return dataclasses.replace(self, image_path=path)

    def with_model_path(self, path: str) -> DiscoveryEntry:
        return dataclasses.replace(self, model_path=path)

    def with_seen(self, seen: bool) -> DiscoveryEntry:
        return dataclasses.replace(self, seen=seen)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> DiscoveryEntry:
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass
class DiscoveryInteraction:
    kind: DiscoveryKind = DiscoveryKind.ITEM
    id: str = ""
    action: DiscoveryInteractionAction = DiscoveryInteractionAction.STATUS_CHANGED
    actor: DiscoveryInteractionActor = field(default_factory=DiscoveryInteractionActor.system)
    script_id: Optional[str] = None
    node_id: Optional[str] = None
    option_id: Optional[str] = None
    note: Optional[str] = None

    def with_script(self, script_id: str) -> DiscoveryInteraction:
        return dataclasses.replace(self, script_id=script_id)

    def with_node(self, node_id: str) -> DiscoveryInteraction:
        return dataclasses.replace(self, node_id=node_id)

    def with_option(self, option_id: str) -> DiscoveryInteraction:
        return dataclasses.replace(self, option_id=option_id)

    def with_note(self, note: str) -> DiscoveryInteraction:
        return dataclasses.replace(self, note=note)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "id": self.id,
            "action": self.action.value,
            "actor": self.actor.to_data(),
            "script_id": self.script_id,
            "node_id": self.node_id,
            "option_id": self.option_id,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DiscoveryInteraction:
        result = cls()
        if "kind" in data:
            result.kind = DiscoveryKind(data["kind"])
        if "action" in data:
            result.action = DiscoveryInteractionAction(data["action"])
        if "actor" in data:
            result.actor = DiscoveryInteractionActor.from_data(data["actor"])
        for name in ("id", "script_id", "node_id", "option_id", "note"):
            if name in data:
                setattr(result, name, data[name])
        return result


@dataclass
class DiscoveryInteractionRecord:
    sequence: int = 0
    interaction: DiscoveryInteraction = field(default_factory=DiscoveryInteraction)

    def to_dict(self) -> dict:
        return {"sequence": self.sequence, "interaction": self.interaction.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> DiscoveryInteractionRecord:
        return cls(
            sequence=data.get("sequence", 0),
            interaction=DiscoveryInteraction.from_dict(data.get("interaction", {})),
        )


@dataclass
class DiscoveryDbSnapshot:
    items: list = field(default_factory=list)
    npcs: list = field(default_factory=list)
    interactions: list = field(default_factory=list)
    revision: int = 1
    next_interaction_sequence: int = 1

    def to_dict(self) -> dict:
        return {
            "items": [e.to_dict() for e in self.items],
            "npcs": [e.to_dict() for e in self.npcs],
            "interactions": [r.to_dict() for r in self.interactions],
            "revision": self.revision,
            "next_interaction_sequence": self.next_interaction_sequence,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DiscoveryDbSnapshot:
        return cls(
            items=[DiscoveryEntry.from_dict(e) for e in data.get("items", [])],
            npcs=[DiscoveryEntry.from_dict(e) for e in data.get("npcs", [])],
            interactions=[
                DiscoveryInteractionRecord.from_dict(r) for r in data.get("interactions", [])
            ],
            revision=data.get("revision", 1),
            next_interaction_sequence=data.get("next_interaction_sequence", 1),
        )


@dataclass(frozen=True)
class Upsert:
    kind: DiscoveryKind
    entry: DiscoveryEntry


@dataclass(frozen=True)
class Remove:
    kind: DiscoveryKind
    id: str


@dataclass(frozen=True)
class SetSeen:
    kind: DiscoveryKind
    id: str
    seen: bool


@dataclass(frozen=True)
class MoveItem:
    id: str
    to_index: int


@dataclass(frozen=True)
class DropItem:
    id: str


@dataclass(frozen=True)
class ClearKind:
    kind: DiscoveryKind


@dataclass(frozen=True)
class RecordInteraction:
    interaction: DiscoveryInteraction


@dataclass(frozen=True)
class ReplaceAll:
    snapshot: DiscoveryDbSnapshot


@dataclass(frozen=True)
class SpawnDroppedItem:
    id: str
    model_path: str