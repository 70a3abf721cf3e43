"""Requests and commands sent to the dialogue user interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .discovery import DiscoveryEntry


class UiDialogueMode(Enum):
    STANDARD = "standard"
    INVENTORY = "inventory"


@dataclass(frozen=True)
class UiDialoguePreview:
    title: str
    subtitle: str = ""
    description: str = ""
    image_path: Optional[str] = None
    model_path: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: DiscoveryEntry) -> UiDialoguePreview:
        return cls(
            title=entry.title,
            subtitle=entry.subtitle,
            description=entry.description,
            image_path=entry.image_path,
            model_path=entry.model_path,
        )


@dataclass
class UiDialogueOption:
    text: str
    preview: Optional[UiDialoguePreview] = None
    item_id: Optional[str] = None
    seen: bool = False
    enabled: bool = True

    @classmethod
    def back(cls) -> UiDialogueOption:
        """The option that leaves a picker."""
        return cls("back")


@dataclass
class UiDialogueRequest:
    mode: UiDialogueMode
    speaker: str
    text: str
    portrait_path: str
    preview: Optional[UiDialoguePreview] = None
    options: list = field(default_factory=list)
    reveal_duration_secs: float = 0.0


@dataclass(frozen=True)
class OpenInventory:
    pass


@dataclass(frozen=True)
class StartDialogue:
    request: UiDialogueRequest


@dataclass(frozen=True)
class AdvanceDialogue:
    pass


@dataclass(frozen=True)
class CloseDialogue:
    pass