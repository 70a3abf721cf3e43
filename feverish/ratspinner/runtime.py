"""Runs dialogue scripts: tracks the active node and emits UI, voice, hook and discovery messages."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from ..discovery import (
    DiscoveryEntry,
    DiscoveryInteraction,
    DiscoveryInteractionAction,
    DiscoveryInteractionActor,
    DiscoveryKind,
    RecordInteraction,
    SetSeen,
)
from ..ui_messages import (
    CloseDialogue,
    StartDialogue,
    UiDialogueMode,
    UiDialogueOption,
    UiDialoguePreview,
    UiDialogueRequest,
)
from .types import (
    DEFAULT_PORTRAIT,
    RatAdvance,
    RatChoose,
    RatClose,
    RatDialoguePresentation,
    RatHookTriggered,
    RatNode,
    RatNodeBuilder,
    RatOptionBuilder,
    RatRegister,
    RatScript,
    RatScriptAsset,
    RatScriptBuilder,
    RatStart,
    VoicePreset,
)

__all__ = [
    "DiscoveryView",
    "DialogueOverlay",
    "ActiveDialogue",
    "Speak",
    "StopVoice",
    "RatOutbox",
    "RatLibrary",
    "RatRuntime",
    "can_show_items_in_dialogue",
]

log = logging.getLogger(__name__)

SpeechEstimator = Callable[[str, VoicePreset], float]

SHOW_ITEM_HOOK = "dialogue.show_item"


def can_show_items_in_dialogue(script_id: str) -> bool:
    """Phone conversations cannot be shown items."""
    return not script_id.startswith("npc.phone")


@dataclass
class DiscoveryView:
    """Read-only view of what the player has discovered, as dialogue needs it."""

    items: list = field(default_factory=list)
    npcs: list = field(default_factory=list)
    interactions: list = field(default_factory=list)

    def entries(self, kind: DiscoveryKind) -> list:
        return self.items if kind is DiscoveryKind.ITEM else self.npcs

    def was_item_shared_with_speaker(self, item_id: str, script_id: str, speaker: str) -> bool:
        """Whether a shared-item interaction with this speaker in this script is recorded."""
        actor = DiscoveryInteractionActor.speaker(speaker)
        return any(
            record.interaction.kind is DiscoveryKind.ITEM
            and record.interaction.id == item_id
            and record.interaction.action is DiscoveryInteractionAction.SHARED
            and record.interaction.actor == actor
            and record.interaction.script_id == script_id
            for record in self.interactions
        )


class DialogueOverlay(Enum):
    NONE = "none"
    INVENTORY_PICKER = "inventory_picker"
    ITEM_RESPONSE = "item_response"


@dataclass
class ActiveDialogue:
    script_id: str
    node_id: str
    target: Optional[Any] = None
    presentation: RatDialoguePresentation = RatDialoguePresentation.UI
    overlay: DialogueOverlay = DialogueOverlay.NONE

    @property
    def headless(self) -> bool:
        return self.presentation is RatDialoguePresentation.HEADLESS


@dataclass(frozen=True)
class Speak:
    text: str
    voice: VoicePreset = VoicePreset.NEUTRAL_NPC
    target: Optional[Any] = None


@dataclass(frozen=True)
class StopVoice:
    pass


@dataclass
class RatOutbox:
    """Messages produced while handling commands, grouped by recipient."""

    hooks: list = field(default_factory=list)
    ui: list = field(default_factory=list)
    discovery: list = field(default_factory=list)
    voice: list = field(default_factory=list)

    def clear(self) -> None:
        self.hooks.clear()
        self.ui.clear()
        self.discovery.clear()
        self.voice.clear()


class RatLibrary:
    """Scripts known to the runtime, by id."""

    def __init__(self) -> None:
        self.scripts: dict = {}

    def __contains__(self, script_id: object) -> bool:
        return script_id in self.scripts

    def __len__(self) -> int:
        return len(self.scripts)

    def register(self, script: RatScript) -> None:
        self.scripts[script.id] = script

    def get(self, script_id: str) -> Optional[RatScript]:
        return self.scripts.get(script_id)

    def load_assets(self, assets: Iterable[Optional[RatScriptAsset]]) -> None:
        """Replace the library with the scripts of the given assets; None marks one not ready."""
        self.scripts.clear()
        for asset in assets:
            if asset is None:
                log.warning("ratspinner script asset not ready")
                continue
            for script in asset.scripts:
                self.register(script)

    def seed_builtin(self) -> None:
        """Add the default NPC conversation unless a script with its id exists."""
        if "npc.default" in self.scripts:
            return
        script = (
            RatScriptBuilder("npc.default")
            .entry("greeting")
            .node(
                RatNodeBuilder("greeting")
                .speaker("mr. d.")
                .portrait(DEFAULT_PORTRAIT)
                .text("hey there! i'm mr d.")
                .hook("npc.default.greeting")
                .option(
                    RatOptionBuilder("who are you?")
                    .id("ask_identity")
                    .goto("identity")
                    .hook("npc.default.option.identity")
                )
                .option(
                    RatOptionBuilder("what happened here?")
                    .id("ask_place")
                    .goto("place")
                    .hook("npc.default.option.place")
                )
                .option(
                    RatOptionBuilder("i should go.")
                    .id("leave")
                    .hook("npc.default.option.leave")
                )
            )
            .node(
                RatNodeBuilder("identity")
                .speaker("mr. d.")
                .portrait(DEFAULT_PORTRAIT)
                .text("i am mr d!!!!!")
                .next("greeting")
            )
            .node(
                RatNodeBuilder("place")
                .speaker("mr. d.")
                .portrait(DEFAULT_PORTRAIT)
                .text("its doom time")
                .next("greeting")
            )
            .build()
        )
        self.register(script)


def _no_estimate(text: str, voice: VoicePreset) -> float:
    return 0.0


class RatRuntime:
    """Drives one dialogue at a time in response to commands."""

    def __init__(
        self,
        library: Optional[RatLibrary] = None,
        discovery: Optional[DiscoveryView] = None,
        speech_duration: Optional[SpeechEstimator] = None,
    ) -> None:
        self.library = library if library is not None else RatLibrary()
        self.discovery = discovery if discovery is not None else DiscoveryView()
        self.speech_duration = speech_duration or _no_estimate
        self.outbox = RatOutbox()
        self.active: Optional[ActiveDialogue] = None
        self.dialogue_active = False

    # commands

    def handle(self, command: object) -> None:
        match command:
            case RatRegister(script=script):
                self.library.register(script)
            case RatStart():
                self._start(command)
            case RatAdvance():
                self._advance()
            case RatChoose(index=index):
                self._choose(index)
            case RatClose():
                headless = self._headless()
                self.active = None
                self.dialogue_active = False
                if not headless:
                    self.outbox.ui.append(CloseDialogue())
                self.outbox.voice.append(StopVoice())
            case _:
                raise TypeError(f"unknown dialogue command {command!r}")

    def handle_all(self, commands: Iterable[object]) -> None:
        for command in commands:
            self.handle(command)

    # internals

    def _headless(self) -> bool:
        return self.active is not None and self.active.headless

    def _hook(self, hook: str, active: ActiveDialogue, option_id: Optional[str]) -> None:
        self.outbox.hooks.append(
            RatHookTriggered(hook, active.script_id, active.node_id, option_id, active.target)
        )

    def _speak(self, text: str, voice: VoicePreset, target: Optional[Any]) -> None:
        self.outbox.voice.append(StopVoice())
        self.outbox.voice.append(Speak(text, voice, target))

    def _resolve_start(self, start: RatStart) -> Optional[tuple]:
        script = self.library.get(start.script_id)
        if script is not None:
            entry = start.entry if start.entry is not None else script.entry
            if entry not in script.nodes:
                log.warning("ratspinner entry '%s' not found in script '%s'", entry, script.id)
                return None
            return start.script_id, entry

        if start.entry is None and "." in start.script_id:
            script_id, entry_node = start.script_id.rsplit(".", 1)
            script = self.library.get(script_id)
            if script is not None:
                if entry_node not in script.nodes:
                    log.warning(
                        "ratspinner entry '%s' not found in script '%s'", entry_node, script.id
                    )
                    return None
                return script_id, entry_node

        log.warning("ratspinner script '%s' not found", start.script_id)
        return None

    def _start(self, start: RatStart) -> None:
        resolved = self._resolve_start(start)
        if resolved is None:
            return
        script_id, entry_node = resolved
        script = self.library.get(script_id)
        if script is None:
            log.warning("ratspinner script '%s' not found", script_id)
            return

        self.active = ActiveDialogue(script_id, entry_node, start.target, start.presentation)
        interaction = (
            DiscoveryInteraction(
                DiscoveryKind.NPC,
                script.id,
                DiscoveryInteractionAction.INSPECTED,
                DiscoveryInteractionActor.player(),
            )
            .with_script(script.id)
            .with_node(entry_node)
            .with_note("dialogue.start")
        )
        self.outbox.discovery.append(RecordInteraction(interaction))
        self.dialogue_active = True
        self._show_current(speak=True)

    def _current(self) -> Optional[tuple]:
        """The active dialogue with its script and node, closing when either is missing."""
        if self.active is None:
            return None
        script = self.library.get(self.active.script_id)
        node = script.nodes.get(self.active.node_id) if script is not None else None
        if node is None:
            self._close()
            return None
        return dataclasses.replace(self.active), script, node

    def _goto(self, node_id: str) -> None:
        if self.active is not None:
            self.active.node_id = node_id
            self.active.overlay = DialogueOverlay.NONE
        self._show_current(speak=True)

    def _reset_overlay(self) -> None:
        if self.active is not None:
            self.active.overlay = DialogueOverlay.NONE
        self._show_current(speak=True)

    def _advance(self) -> None:
        if self.active is None:
            return
        current = self._current()
        if current is None:
            return
        _, _, node = current
        if node.options:
            self._choose(0)
        elif node.next is not None:
            self._goto(node.next)
        else:
            self._close()

    def _choose(self, index: int) -> None:
        if self.active is None:
            return
        current = self._current()
        if current is None:
            return
        snapshot, script, node = current

        if snapshot.overlay is DialogueOverlay.INVENTORY_PICKER:
            items = self.discovery.entries(DiscoveryKind.ITEM)
            if 0 <= index < len(items):
                self._show_item(snapshot, script, node, items[index])
            else:
                self._reset_overlay()
            return

        if snapshot.overlay is DialogueOverlay.ITEM_RESPONSE:
            self._reset_overlay()
            return

        if can_show_items_in_dialogue(snapshot.script_id) and index == len(node.options):
            if not self.discovery.entries(DiscoveryKind.ITEM):
                return
            self._open_inventory_picker(snapshot.script_id, node.speaker, snapshot.headless)
            if self.active is not None:
                self.active.overlay = DialogueOverlay.INVENTORY_PICKER
            if not snapshot.headless:
                self.outbox.voice.append(StopVoice())
            return

        if not node.options:
            self._advance()
            return

        option = node.options[index] if 0 <= index < len(node.options) else node.options[0]
        for hook in option.hooks:
            self._hook(hook, snapshot, option.id)

        target = option.next if option.next is not None else node.next
        if target is not None:
            self._goto(target)
        else:
            self._close()

    def _show_item(
        self, snapshot: ActiveDialogue, script: RatScript, node: RatNode, item: DiscoveryEntry
    ) -> None:
        self._hook(SHOW_ITEM_HOOK, snapshot, item.id)

        specific_response_id = f"response_{item.id}"
        if specific_response_id in script.nodes:
            self._goto(specific_response_id)
            return

        if self.active is not None:
            self.active.overlay = DialogueOverlay.ITEM_RESPONSE
        self.outbox.discovery.append(SetSeen(DiscoveryKind.ITEM, item.id, True))
        already_shared = self.discovery.was_item_shared_with_speaker(
            item.id, snapshot.script_id, node.speaker
        )
        interaction = (
            DiscoveryInteraction(
                DiscoveryKind.ITEM,
                item.id,
                DiscoveryInteractionAction.SHARED,
                DiscoveryInteractionActor.speaker(node.speaker),
            )
            .with_script(snapshot.script_id)
            .with_node(snapshot.node_id)
            .with_option(item.id)
            .with_note(SHOW_ITEM_HOOK)
        )
        self.outbox.discovery.append(RecordInteraction(interaction))

        remark = "i remember this" if already_shared else "what is this?"
        line = f"hmm... {item.title}. {remark}"
        if not snapshot.headless:
            self.outbox.ui.append(
                StartDialogue(
                    UiDialogueRequest(
                        mode=UiDialogueMode.STANDARD,
                        speaker=node.speaker,
                        text=line,
                        portrait_path=node.portrait_path,
                        preview=UiDialoguePreview.from_entry(item),
                        options=[UiDialogueOption.back()],
                        reveal_duration_secs=self.speech_duration(line, node.voice),
                    )
                )
            )
            self._speak(line, node.voice, snapshot.target)

    def _open_inventory_picker(self, script_id: str, speaker: str, headless: bool) -> None:
        if headless:
            return
        options = [
            UiDialogueOption(
                text=entry.title,
                preview=UiDialoguePreview.from_entry(entry),
                item_id=entry.id,
                seen=self.discovery.was_item_shared_with_speaker(entry.id, script_id, speaker),
            )
            for entry in self.discovery.entries(DiscoveryKind.ITEM)
        ]
        options.append(UiDialogueOption.back())
        self.outbox.ui.append(
            StartDialogue(
                UiDialogueRequest(
                    mode=UiDialogueMode.INVENTORY,
                    speaker="inventory",
                    text="pick an item to show",
                    portrait_path=DEFAULT_PORTRAIT,
                    preview=options[0].preview,
                    options=options,
                    reveal_duration_secs=0.0,
                )
            )
        )

    def _node_options(self, node: RatNode, script_id: str) -> list:
        options = [UiDialogueOption(text=option.text) for option in node.options]
        if can_show_items_in_dialogue(script_id):
            options.append(
                UiDialogueOption(
                    text="Show item...",
                    enabled=bool(self.discovery.entries(DiscoveryKind.ITEM)),
                )
            )
        return options

    def _show_current(self, speak: bool) -> None:
        if self.active is None:
            self._close()
            return
        current = self._current()
        if current is None:
            return
        active, _, node = current

        for hook in node.hooks:
            self._hook(hook, active, None)

        if active.headless:
            return
        self.outbox.ui.append(
            StartDialogue(
                UiDialogueRequest(
                    mode=UiDialogueMode.STANDARD,
                    speaker=node.speaker,
                    text=node.text,
                    portrait_path=node.portrait_path,
                    preview=None,
                    options=self._node_options(node, active.script_id),
                    reveal_duration_secs=(
                        self.speech_duration(node.text, node.voice) if speak else 0.0
                    ),
                )
            )
        )
        if speak:
            self._speak(node.text, node.voice, active.target)

    def _close(self) -> None:
        headless = self._headless()
        self.active = None
        self.dialogue_active = False
        if not headless:
            self.outbox.ui.append(CloseDialogue())
            self.outbox.voice.append(StopVoice())