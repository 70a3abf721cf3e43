"""Reading dialogue scripts from the line-based `.rat` format and from RON files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .. import ron
from .types import DEFAULT_ENTRY, RatNode, RatOption, RatScript, RatScriptAsset, VoicePreset

__all__ = [
    "RatScriptLoadError",
    "InvalidScriptError",
    "UnsupportedExtensionError",
    "parse_rat_scripts",
    "parse_rat_script",
    "parse_option_line",
    "load_script_bytes",
    "load_script_file",
]

_SECTION_MARKER = "// script:"


class RatScriptLoadError(Exception):
    """Raised when a script asset cannot be read or parsed."""


class InvalidScriptError(RatScriptLoadError):
    """Raised when a script is readable but its content is not a valid script."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"invalid script asset: {detail}")


class UnsupportedExtensionError(RatScriptLoadError):
    """Raised for a file extension that no script format uses."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"unsupported script extension '{extension}'")


def _lines(content: str) -> list[str]:
    parts = content.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def parse_rat_scripts(content: str, fallback_script_id: str) -> list[RatScript]:
    """Split content at `// script:` markers and parse each section as a script."""
    sections: list[str] = []
    current: list[str] = []
    for line in _lines(content):
        if line.strip().startswith(_SECTION_MARKER) and "".join(current).strip():
            sections.append("".join(current))
            current = []
        current.append(line + "\n")
    if "".join(current).strip():
        sections.append("".join(current))

    if not sections:
        raise InvalidScriptError("script does not define any content")
    return [parse_rat_script(section, fallback_script_id) for section in sections]


def _extend_hooks(raw: str, hooks: list) -> None:
    hooks.extend(hook.strip() for hook in raw.split(",") if hook.strip())


def _split_target_and_annotations(raw: str) -> tuple[str, str]:
    index = raw.find("[")
    if index < 0:
        return raw.strip(), ""
    return raw[:index].strip(), raw[index:].strip()


def _parse_option_annotations(raw: str, option: RatOption) -> None:
    remaining = raw.strip()
    while True:
        start = remaining.find("[")
        if start < 0:
            break
        end = remaining.find("]", start + 1)
        if end < 0:
            break
        annotation = remaining[start + 1:end].strip()
        if annotation.startswith("hook:"):
            _extend_hooks(annotation[len("hook:"):], option.hooks)
        elif annotation.startswith("id:"):
            value = annotation[len("id:"):].strip()
            if value:
                option.id = value
        remaining = remaining[end + 1:].strip()


def parse_option_line(raw: str, line_number: int) -> RatOption:
    """Parse the part of an option line after '>': text, target and annotations."""
    metadata: Optional[str]
    if "->" in raw:
        text, rest = raw.split("->", 1)
        text_part, metadata, inline = text.strip(), rest.strip(), ""
    else:
        text_part, inline = _split_target_and_annotations(raw.strip())
        metadata = None

    if not text_part:
        raise InvalidScriptError(f"line {line_number} has an empty option text")

    option = RatOption(text=text_part)
    if metadata is not None:
        target, annotations = _split_target_and_annotations(metadata)
        if target:
            option.next = target
        _parse_option_annotations(annotations, option)
    _parse_option_annotations(inline, option)
    return option


def _add_node(node: Optional[RatNode], nodes: dict) -> None:
    if node is None:
        return
    if node.id in nodes:
        raise InvalidScriptError(f"duplicate node id '{node.id}'")
    nodes[node.id] = node


def parse_rat_script(content: str, fallback_script_id: str) -> RatScript:
    """Parse one script section; the entry falls back to the first node."""
    script_id = fallback_script_id
    entry = DEFAULT_ENTRY
    nodes: dict = {}
    first_node_id: Optional[str] = None
    current: Optional[RatNode] = None

    for line_number, line in enumerate(_lines(content), start=1):
        raw = line.strip()
        if not raw:
            continue

        if raw.startswith("//"):
            key, sep, value = raw[2:].strip().partition(":")
            key, value = key.strip(), value.strip()
            if sep and value:
                if key == "script":
                    script_id = value
                elif key == "entry":
                    entry = value
            continue

        if raw.startswith("[") and raw.endswith("]"):
            _add_node(current, nodes)
            current = None
            node_id = raw[1:-1].strip()
            if not node_id:
                raise InvalidScriptError(f"line {line_number} has an empty node id")
            if first_node_id is None:
                first_node_id = node_id
            current = RatNode(node_id)
            continue

        if current is None:
            continue

        if raw.startswith(">"):
            current.options.append(parse_option_line(raw[1:].strip(), line_number))
            continue

        if raw.startswith("->"):
            target = raw[2:].strip()
            if target:
                current.next = target
            continue

        key, sep, value = raw.partition(":")
        if not sep:
            continue
        key, value = key.strip(), value.strip()
        if key == "speaker":
            current.speaker = value
        elif key == "text":
            current.text = value
        elif key == "portrait":
            current.portrait_path = value
        elif key == "voice":
            try:
                current.voice = VoicePreset.parse(value)
            except ValueError:
                current.voice = VoicePreset.NEUTRAL_NPC
        elif key == "hook":
            _extend_hooks(value, current.hooks)

    _add_node(current, nodes)

    if not nodes:
        raise InvalidScriptError("script does not define any nodes")

    if entry not in nodes:
        if first_node_id is None:
            raise InvalidScriptError(f"entry node '{entry}' was not found")
        entry = first_node_id

    return RatScript(script_id, entry, nodes)


def load_script_bytes(data: bytes, path: Union[str, Path]) -> RatScriptAsset:
    """Parse script bytes in the format chosen by the path's extension."""
    location = Path(path)
    extension = location.suffix[1:].lower() if location.suffix else ""
    fallback_script_id = location.stem or "script"

    if extension == "rat":
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as error:
            raise RatScriptLoadError(f"script asset is not valid utf-8: {error}") from error
        return RatScriptAsset(parse_rat_scripts(content, fallback_script_id))

    if extension == "ron":
        try:
            raw = ron.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ron.RonError) as error:
            raise RatScriptLoadError(f"failed to parse script RON: {error}") from error
        try:
            script = RatScript.from_ron_data(raw)
        except ValueError as error:
            raise InvalidScriptError(str(error)) from error
        return RatScriptAsset([script])

    raise UnsupportedExtensionError(extension)


def load_script_file(path: Union[str, Path]) -> RatScriptAsset:
    """Read a script file from disk and parse it."""
    try:
        data = Path(path).read_bytes()
    except OSError as error:
        raise RatScriptLoadError(f"failed to read script asset bytes: {error}") from error
    return load_script_bytes(data, path)