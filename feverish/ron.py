"""A small reader and writer for the RON text format used by save files."""

from __future__ import annotations

import math
import re
from typing import Any

__all__ = ["RonError", "loads", "dumps"]

_NUMBER = re.compile(r"[-+]?(?:\d[\d_]*)(?:\.\d[\d_]*)?(?:[eE][-+]?\d+)?|[-+]?\.\d+(?:[eE][-+]?\d+)?")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r", "0": "\0", "/": "/"}


class RonError(ValueError):
    """Raised when text is not valid RON."""

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        super().__init__(message if position is None else f"{message} at offset {position}")


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip(self) -> None:
        text = self.text
        while self.pos < len(text):
            if text[self.pos].isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end < 0 else end + 1
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end < 0:
                    raise RonError("unterminated block comment", self.pos)
                self.pos = end + 2
            else:
                break

    def peek(self) -> str:
        self.skip()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise RonError(f"expected {char!r}", self.pos)
        self.pos += 1

    def value(self) -> Any:
        char = self.peek()
        if not char:
            raise RonError("unexpected end of input", self.pos)
        if char == "(":
            return self.parens()
        if char == "[":
            return self.sequence()
        if char == "{":
            return self.mapping()
        if char == '"':
            return self.string()
        match = _IDENT.match(self.text, self.pos)
        if match and match.group() not in ("inf", "NaN"):
            return self.identifier(match)
        return self.number()

    def identifier(self, match: re.Match) -> Any:
        name = match.group()
        self.pos = match.end()
        if name == "true":
            return True
        if name == "false":
            return False
        if name == "None":
            return None
        if self.peek() == "(":
            inner = self.parens()
            if name == "Some":
                if isinstance(inner, tuple) and len(inner) == 1:
                    return inner[0]
                raise RonError("Some takes exactly one value", self.pos)
            return inner
        if name == "Some":
            raise RonError("expected '(' after Some", self.pos)
        return name

    def number(self) -> Any:
        text = self.text
        for word, result in (("inf", math.inf), ("-inf", -math.inf), ("+inf", math.inf), ("NaN", math.nan)):
            if text.startswith(word, self.pos):
                self.pos += len(word)
                return result
        match = _NUMBER.match(text, self.pos)
        if not match:
            raise RonError("unexpected character", self.pos)
        self.pos = match.end()
        raw = match.group().replace("_", "")
        if "." in raw or "e" in raw or "E" in raw:
            return float(raw)
        return int(raw)

    def string(self) -> str:
        self.pos += 1
        out: list[str] = []
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            self.pos += 1
            if char == '"':
                return "".join(out)
            if char != "\\":
                out.append(char)
                continue
            if self.pos >= len(text):
                break
            esc = text[self.pos]
            self.pos += 1
            if esc in _ESCAPES:
                out.append(_ESCAPES[esc])
            elif esc == "u" and text.startswith("{", self.pos):
                end = text.find("}", self.pos)
                if end < 0:
                    raise RonError("bad unicode escape", self.pos)
                out.append(chr(int(text[self.pos + 1:end], 16)))
                self.pos = end + 1
            else:
                raise RonError(f"unknown escape \\{esc}", self.pos)
        raise RonError("unterminated string", self.pos)

    def _field_name(self) -> str | None:
        start = self.pos
        self.skip()
        match = _IDENT.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            if self.peek() == ":":
                self.pos += 1
                return match.group()
        self.pos = start
        return None

    def parens(self) -> Any:
        self.expect("(")
        if self.peek() == ")":
            self.pos += 1
            return ()
        start = self.pos
        if self._field_name() is not None:
            self.pos = start
            fields: dict[str, Any] = {}
            while self.peek() != ")":
                name = self._field_name()
                if name is None:
                    raise RonError("expected field name", self.pos)
                if name in fields:
                    raise RonError(f"duplicate field '{name}'", self.pos)
                fields[name] = self.value()
                if self.peek() == ",":
                    self.pos += 1
                elif self.peek() != ")":
                    raise RonError("expected ',' or ')'", self.pos)
            self.pos += 1
            return fields
        items = self._items(")")
        return tuple(items)

    def _items(self, close: str) -> list[Any]:
        items: list[Any] = []
        while self.peek() != close:
            items.append(self.value())
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != close:
                raise RonError(f"expected ',' or {close!r}", self.pos)
        self.pos += 1
        return items

    def sequence(self) -> list[Any]:
        self.expect("[")
        return self._items("]")

    def mapping(self) -> dict[Any, Any]:
        self.expect("{")
        result: dict[Any, Any] = {}
        while self.peek() != "}":
            key = self.value()
            self.expect(":")
            result[key] = self.value()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "}":
                raise RonError("expected ',' or '}'", self.pos)
        self.pos += 1
        return result


def loads(text: str) -> Any:
    """Parse one RON value; structs become dicts, tuples become tuples."""
    parser = _Parser(text)
    result = parser.value()
    if parser.peek():
        raise RonError("trailing characters", parser.pos)
    return result


def _string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return '"' + escaped.replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r") + '"'


def _scalar(value: Any) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        text = repr(value)
        return text if any(c in text for c in ".eE") else text + ".0"
    if isinstance(value, str):
        return _string(value)
    raise RonError(f"cannot serialize {type(value).__name__}")


def _dump(value: Any, level: int, name: str | None = None) -> str:
    pad = "    " * (level + 1)
    end = "    " * level
    if isinstance(value, dict):
        prefix = name or ""
        if not value:
            return prefix + "()"
        lines = [f"{pad}{key}: {_dump(item, level + 1)}," for key, item in value.items()]
        return prefix + "(\n" + "\n".join(lines) + "\n" + end + ")"
    if isinstance(value, list):
        if not value:
            return "[]"
        lines = [f"{pad}{_dump(item, level + 1)}," for item in value]
        return "[\n" + "\n".join(lines) + "\n" + end + "]"
    if isinstance(value, tuple):
        return "(" + ", ".join(_dump(item, level) for item in value) + ")"
    return _scalar(value)


def dumps(value: Any, name: str | None = None) -> str:
    """Write a value as pretty RON; a dict becomes a struct, optionally named."""
    return _dump(value, 0, name)