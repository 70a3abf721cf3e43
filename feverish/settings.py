"""Player settings with adjustment rules and RON persistence."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path

from . import ron

SETTINGS_SAVE_PATH = Path("saves/settings.ron")


class SettingKey(Enum):
    MASTER_VOLUME = "master volume"
    MUSIC_VOLUME = "music volume"
    UI_SFX_VOLUME = "ui sfx volume"
    WORLD_SFX_VOLUME = "world sfx volume"
    VOICE_VOLUME = "voice volume"
    DIALOGUE_SPEED = "dialogue speed"
    UI_SCALE_MODE = "ui scale mode"
    UI_SCALE = "manual ui scale"
    CURSOR_MOTION = "cursor motion"
    UI_FX = "ui shader"
    UI_MONITOR_DISTORTION = "monitor distortion"
    UI_CURSOR_DISTORTION = "cursor distortion"

    def label(self) -> str:
        """Human-readable name of the setting."""
        return self.value


class SettingsError(Exception):
    """Raised when settings cannot be read, parsed or written."""


def percent_text(value: float) -> str:
    """Format a fraction as a whole percentage."""
    return f"{value * 100.0:.0f}%"


# key -> (field, step, low, high); step None means the setting toggles.
_RULES = {
    SettingKey.MASTER_VOLUME: ("master_volume", 0.05, 0.0, 1.5),
    SettingKey.MUSIC_VOLUME: ("music_volume", 0.05, 0.0, 1.5),
    SettingKey.UI_SFX_VOLUME: ("ui_sfx_volume", 0.05, 0.0, 1.5),
    SettingKey.WORLD_SFX_VOLUME: ("world_sfx_volume", 0.05, 0.0, 1.5),
    SettingKey.VOICE_VOLUME: ("voice_volume", 0.05, 0.0, 1.5),
    SettingKey.DIALOGUE_SPEED: ("dialogue_speed", 0.1, 0.5, 2.0),
    SettingKey.UI_SCALE_MODE: ("ui_scale_auto", None, None, None),
    SettingKey.UI_SCALE: ("manual_ui_scale", 0.05, 0.6, 2.0),
    SettingKey.CURSOR_MOTION: ("cursor_motion", None, None, None),
    SettingKey.UI_FX: ("ui_fx", None, None, None),
    SettingKey.UI_MONITOR_DISTORTION: ("ui_monitor_distortion", None, None, None),
    SettingKey.UI_CURSOR_DISTORTION: ("ui_cursor_distortion", None, None, None),
}


@dataclass
class GameSettings:
    master_volume: float = 1.0
    music_volume: float = 0.2
    ui_sfx_volume: float = 0.9
    world_sfx_volume: float = 0.95
    voice_volume: float = 1.0
    dialogue_speed: float = 1.0
    ui_scale_auto: bool = True
    manual_ui_scale: float = 1.0
    cursor_motion: bool = True
    ui_fx: bool = True
    ui_monitor_distortion: bool = True
    ui_cursor_distortion: bool = True

    def adjust(self, key: SettingKey, direction: int) -> None:
        """Step a numeric setting by the sign of direction, or toggle a flag."""
        step_sign = (direction > 0) - (direction < 0)
        if step_sign == 0:
            return
        name, step, low, high = _RULES[key]
        if step is None:
            setattr(self, name, not getattr(self, name))
        else:
            setattr(self, name, min(max(getattr(self, name) + step_sign * step, low), high))

    def value_text(self, key: SettingKey) -> str:
        """Display text for a setting's current value."""
        if key is SettingKey.UI_SCALE_MODE:
            return "auto" if self.ui_scale_auto else "manual"
        name, step, _, _ = _RULES[key]
        value = getattr(self, name)
        if step is None:
            return "on" if value else "off"
        return percent_text(value)

    def to_ron(self) -> str:
        return ron.dumps(dataclasses.asdict(self))

    @classmethod
    def from_ron(cls, text: str) -> GameSettings:
        """Parse settings; missing fields keep their defaults."""
        try:
            data = ron.loads(text)
        except ron.RonError as error:
            raise SettingsError(str(error)) from error
        if not isinstance(data, dict):
            raise SettingsError("expected a settings struct")
        values = {}
        for field in fields(cls):
            if field.name not in data:
                continue
            value = data[field.name]
            if field.type == "bool":
                if not isinstance(value, bool):
                    raise SettingsError(f"field '{field.name}' must be a bool")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SettingsError(f"field '{field.name}' must be a number")
            else:
                value = float(value)
            values[field.name] = value
        return cls(**values)


class SettingsStore:
    """Reads and writes settings at a file path."""

    def __init__(self, path: Path | str = SETTINGS_SAVE_PATH) -> None:
        self.path = Path(path)

    def load(self) -> GameSettings:
        """Load settings, returning defaults when no file exists."""
        if not self.path.exists():
            return GameSettings()
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            raise SettingsError(f"failed to read '{self.path}': {error}") from error
        try:
            return GameSettings.from_ron(content)
        except SettingsError as error:
            raise SettingsError(
                f"failed to parse '{self.path}' as settings RON: {error}"
            ) from error

    def save(self, settings: GameSettings) -> None:
        parent = self.path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise SettingsError(
                f"failed to create settings directory '{parent}': {error}"
            ) from error
        try:
            self.path.write_text(settings.to_ron(), encoding="utf-8")
        except OSError as error:
            raise SettingsError(
                f"failed to write settings file '{self.path}': {error}"
            ) from error