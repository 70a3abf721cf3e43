"""Dialogue scripts, their builders, commands and the data form used in RON files."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

DEFAULT_SPEAKER = "unknown"
DEFAULT_PORTRAIT = "models/npc_a/npc_a.png"
DEFAULT_ENTRY = "start"

_MISSING = object()


class VoicePreset(Enum):
    HOSTILE_ENTITY = "hostile_entity"
    LOST_CHILD = "lost_child"
    CORRUPTED_TRANSMISSION = "corrupted_transmission"
    NEUTRAL_NPC = "neutral_npc"

    @classmethod
    def parse(cls, value: str) -> VoicePreset:
        """Parse a preset name, ignoring case and '_', '-' or space separators."""
        key = "".join(ch for ch in value.strip().lower() if ch not in "_- ")
        for preset in cls:
            if preset.value.replace("_", "") == key:
                return preset
        raise ValueError(f"unknown voice preset '{value}'")


class RatDialoguePresentation(Enum):
    UI = "ui"
    HEADLESS = "headless"


@dataclass(frozen=True)
class RatStart:
    """Request to start a script, optionally at a given node and for a target."""

    script_id: str
    entry: Optional[str] = None
    target: Optional[Any] = None
    presentation: RatDialoguePresentation = RatDialoguePresentation.UI

    def with_entry(self, entry_node: str) -> RatStart:
        return dataclasses.replace(self, entry=entry_node)

    def with_target(self, target: Any) -> RatStart:
        return dataclasses.replace(self, target=target)

    def headless(self) -> RatStart:
        return dataclasses.replace(self, presentation=RatDialoguePresentation.HEADLESS)


@dataclass(frozen=True)
class RatAdvance:
    pass


@dataclass(frozen=True)
class RatChoose:
    index: int


@dataclass(frozen=True)
class RatClose:
    pass


@dataclass(frozen=True)
class RatRegister:
    script: RatScript


@dataclass(frozen=True)
class RatHookTriggered:
    hook: str
    script_id: str
    node_id: str
    option_id: Optional[str] = None
    target: Optional[Any] = None


@dataclass
class RatOption:
    text: str
    id: Optional[str] = None
    next: Optional[str] = None
    hooks: list = field(default_factory=list)


@dataclass
class RatNode:
    id: str
    speaker: str = DEFAULT_SPEAKER
    text: str = ""
    portrait_path: str = DEFAULT_PORTRAIT
    voice: VoicePreset = VoicePreset.NEUTRAL_NPC
    next: Optional[str] = None
    hooks: list = field(default_factory=list)
    options: list = field(default_factory=list)


def _get(data: dict, name: str, owner: str, default: Any = _MISSING) -> Any:
    if name in data:
        return data[name]
    if default is _MISSING:
        raise ValueError(f"{owner} is missing field '{name}'")
    return default


def _string(data: dict, name: str, owner: str) -> str:
    value = _get(data, name, owner)
    if not isinstance(value, str):
        raise ValueError(f"{owner} field '{name}' must be a string")
    return value


def _optional_string(data: dict, name: str, owner: str) -> Optional[str]:
    value = _get(data, name, owner, None)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{owner} field '{name}' must be a string or None")
    return value


def _string_list(data: dict, name: str, owner: str) -> list:
    value = _get(data, name, owner, [])
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{owner} field '{name}' must be a list of strings")
    return list(value)


def _dict(value: Any, owner: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"{owner} must be a struct")
    return value


def _option_from_data(data: Any) -> RatOption:
    data = _dict(data, "option")
    return RatOption(
        id=_optional_string(data, "id", "option"),
        text=_string(data, "text", "option"),
        next=_optional_string(data, "next", "option"),
        hooks=_string_list(data, "hooks", "option"),
    )


def _node_from_data(data: Any) -> RatNode:
    data = _dict(data, "node")
    voice_raw = _get(data, "voice", "node", VoicePreset.NEUTRAL_NPC.value)
    try:
        voice = VoicePreset(voice_raw)
    except ValueError:
        raise ValueError(f"unknown voice '{voice_raw}'") from None
    options_raw = _get(data, "options", "node", [])
    if not isinstance(options_raw, (list, tuple)):
        raise ValueError("node field 'options' must be a list")
    return RatNode(
        id=_string(data, "id", "node"),
        speaker=_string(data, "speaker", "node"),
        text=_string(data, "text", "node"),
        portrait_path=_string(data, "portrait_path", "node"),
        voice=voice,
        next=_optional_string(data, "next", "node"),
        hooks=_string_list(data, "hooks", "node"),
        options=[_option_from_data(option) for option in options_raw],
    )


@dataclass
class RatScript:
    id: str
    entry: str
    nodes: dict = field(default_factory=dict)

    @classmethod
    def single(cls, script_id: str, speaker: str, text: str) -> RatScript:
        """A script with one 'start' node."""
        node = RatNodeBuilder(DEFAULT_ENTRY).speaker(speaker).text(text).build()
        return cls(script_id, DEFAULT_ENTRY, {node.id: node})

    def to_ron_data(self) -> dict:
        """Plain data for RON files, with nodes sorted by id."""
        return {
            "id": self.id,
            "entry": self.entry,
            "nodes": [
                {
                    "id": node.id,
                    "speaker": node.speaker,
                    "text": node.text,
                    "portrait_path": node.portrait_path,
                    "voice": node.voice.value,
                    "next": node.next,
                    "hooks": list(node.hooks),
                    "options": [
                        {
                            "id": option.id,
                            "text": option.text,
                            "next": option.next,
                            "hooks": list(option.hooks),
                        }
                        for option in node.options
                    ],
                }
                for node in sorted(self.nodes.values(), key=lambda n: n.id)
            ],
        }

    @classmethod
    def from_ron_data(cls, data: Any) -> RatScript:
        """Build a script from RON data; raises ValueError when it is invalid."""
        data = _dict(data, "script")
        script_id = _string(data, "id", "script")
        entry = _string(data, "entry", "script")
        nodes_raw = _get(data, "nodes", "script")
        if not isinstance(nodes_raw, (list, tuple)):
            raise ValueError("script field 'nodes' must be a list")
        nodes: dict = {}
        for raw in nodes_raw:
            node = _node_from_data(raw)
            if node.id in nodes:
                raise ValueError(f"duplicate node id '{node.id}'")
            nodes[node.id] = node
        if entry not in nodes:
            raise ValueError(f"entry node '{entry}' not found in script '{script_id}'")
        return cls(script_id, entry, nodes)


@dataclass
class RatScriptAsset:
    scripts: list = field(default_factory=list)


class RatOptionBuilder:
    """Fluent construction of a dialogue option."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._id: Optional[str] = None
        self._next: Optional[str] = None
        self._hooks: list = []

    def id(self, option_id: str) -> RatOptionBuilder:
        self._id = option_id
        return self

    def goto(self, node_id: str) -> RatOptionBuilder:
        self._next = node_id
        return self

    def hook(self, hook: str) -> RatOptionBuilder:
        self._hooks.append(hook)
        return self

    def build(self) -> RatOption:
        return RatOption(text=self._text, id=self._id, next=self._next, hooks=list(self._hooks))


class RatNodeBuilder:
    """Fluent construction of a dialogue node."""

    def __init__(self, node_id: str) -> None:
        self._id = node_id
        self._speaker = DEFAULT_SPEAKER
        self._text = ""
        self._portrait = DEFAULT_PORTRAIT
        self._voice = VoicePreset.NEUTRAL_NPC
        self._next: Optional[str] = None
        self._hooks: list = []
        self._options: list = []

    def speaker(self, speaker: str) -> RatNodeBuilder:
        self._speaker = speaker
        return self

    def text(self, text: str) -> RatNodeBuilder:
        self._text = text
        return self

    def portrait(self, path: str) -> RatNodeBuilder:
        self._portrait = path
        return self

    def voice(self, preset: VoicePreset) -> RatNodeBuilder:
        self._voice = preset
        return self

    def next(self, node_id: str) -> RatNodeBuilder:
        self._next = node_id
        return self

    def hook(self, hook: str) -> RatNodeBuilder:
        self._hooks.append(hook)
        return self

    def option(self, option: RatOptionBuilder) -> RatNodeBuilder:
        self._options.append(option)
        return self

    def build(self) -> RatNode:
        return RatNode(
            id=self._id,
            speaker=self._speaker,
            text=self._text,
            portrait_path=self._portrait,
            voice=self._voice,
            next=self._next,
            hooks=list(self._hooks),
            options=[option.build() for option in self._options],
        )


class RatScriptBuilder:
    """Fluent construction of a script; later nodes replace earlier ones with the same id."""

    def __init__(self, script_id: str) -> None:
        self._id = script_id
        self._entry = DEFAULT_ENTRY
        self._nodes: list = []

    def entry(self, node_id: str) -> RatScriptBuilder:
        self._entry = node_id
        return self

    def node(self, node: RatNodeBuilder) -> RatScriptBuilder:
        self._nodes.append(node)
        return self

    def build(self) -> RatScript:
        nodes = {}
        for builder in self._nodes:
            built = builder.build()
            nodes[built.id] = built
        return RatScript(self._id, self._entry, nodes)