"""
Script loaders: turn endpoint file content into Node trees.

The discovery pass never executes a script, it only inspects the tree a
loader returns. HyperlambdaLoader handles the bundled ".hl" text format;
other formats plug in by subclassing BaseLoader.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Set, Tuple

from .base import Node


class HyperlambdaError(ValueError):
    """Malformed Hyperlambda text."""

    def __init__(self, message: str, line: int):
        self.line = line
        super().__init__(f"line {line}: {message}")


# =============================================================================
# BASE LOADER (Abstract)
# =============================================================================

class BaseLoader(ABC):
    """Parses the content of one endpoint file into a Node tree."""

    @property
    @abstractmethod
    def extensions(self) -> Set[str]:
        """File extensions this loader handles."""
        pass

    @abstractmethod
    def parse(self, content: str) -> Node:
        """Return the root node; children are the script's top-level nodes."""
        pass


# =============================================================================
# HYPERLAMBDA
# =============================================================================

INDENT = 3

_INTEGERS = {"int", "long", "short", "uint", "ulong", "ushort", "byte", "sbyte"}
_FLOATS = {"decimal", "double", "float"}
_STRINGS = {"string", "date", "time", "guid", "char", "x", "node"}


def _to_bool(raw: str, line: int) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise HyperlambdaError(f"'{raw}' is not a bool", line)


def _to_int(raw: str, line: int) -> int:
    try:
        return int(raw)
    except ValueError:
        raise HyperlambdaError(f"'{raw}' is not an integer", line) from None


def _to_float(raw: str, line: int) -> float:
    try:
        return float(raw)
    except ValueError:
        raise HyperlambdaError(f"'{raw}' is not a number", line) from None


CONVERTERS: Dict[str, Callable[[str, int], Any]] = {"bool": _to_bool}
CONVERTERS.update({t: _to_int for t in _INTEGERS})
CONVERTERS.update({t: _to_float for t in _FLOATS})
CONVERTERS.update({t: (lambda raw, line: raw) for t in _STRINGS})


class HyperlambdaParser:
    """
    Reads Hyperlambda text.

    Every line is "name", "name:value" or "name:type:value"; three spaces of
    indentation per level make a node a child of the closest node above it.
    Names and values may be quoted with "..." or @"..." (the latter may span
    lines). // and /* */ comments are skipped.
    """

    def __init__(self, text: str):
        self.text = text.lstrip("\ufeff").replace("\r\n", "\n")
        self.pos = 0
        self.line = 1

    # -- low level ------------------------------------------------------------

    def _eof(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        return self.text[idx] if idx < len(self.text) else ""

    def _advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self._peek() == "\n":
                self.line += 1
            self.pos += 1

    def _rest_of_line(self) -> str:
        end = self.text.find("\n", self.pos)
        if end == -1:
            end = len(self.text)
        chunk = self.text[self.pos:end]
        self.pos = end
        return chunk

    def _skip_newline(self) -> None:
        if self._peek() == "\n":
            self._advance()

    def _read_quoted(self) -> str:
        start_line = self.line
        if self._peek() == "@":
            self._advance(2)
            chars: List[str] = []
            while True:
                if self._eof():
                    raise HyperlambdaError("unterminated string", start_line)
                ch = self._peek()
                if ch == '"':
                    if self._peek(1) == '"':
                        chars.append('"')
                        self._advance(2)
                        continue
                    self._advance()
                    return "".join(chars)
                chars.append(ch)
                self._advance()

        self._advance()
        chars = []
        escapes = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}
        while True:
            ch = self._peek()
            if ch == "" or ch == "\n":
                raise HyperlambdaError("unterminated string", start_line)
            if ch == "\\":
                nxt = self._peek(1)
                chars.append(escapes.get(nxt, nxt))
                self._advance(2)
                continue
            if ch == '"':
                self._advance()
                return "".join(chars)
            chars.append(ch)
            self._advance()

    def _at_quote(self) -> bool:
        return self._peek() == '"' or (self._peek() == "@" and self._peek(1) == '"')

    def _read_token(self) -> Tuple[str, bool]:
        """Read a name or value up to ':' or end of line; returns (text, quoted)."""
        if self._at_quote():
            return self._read_quoted(), True
        start = self.pos
        while not self._eof() and self._peek() not in ":\n":
            self.pos += 1
        return self.text[start:self.pos], False

    # -- grammar ---------------------------------------------------------------

    def _read_value(self) -> Any:
        line = self.line
        if self._at_quote():
            return self._read_quoted()

        head, _ = self._read_token()
        if self._peek() == ":" and head in CONVERTERS:
            self._advance()
            if self._at_quote():
                raw = self._read_quoted()
            else:
                raw = self._rest_of_line().rstrip()
            return CONVERTERS[head](raw, line)
        return (head + self._rest_of_line()).rstrip()

    def _read_node(self) -> Node:
        name, quoted = self._read_token()
        if not quoted:
            name = name.rstrip()
        node = Node(name)
        if self._peek() == ":":
            self._advance()
            node.value = self._read_value()
        trailing = self._rest_of_line()
        if trailing.strip():
            raise HyperlambdaError(f"unexpected content '{trailing.strip()}'", self.line)
        return node

    def _skip_block_comment(self) -> None:
        start_line = self.line
        end = self.text.find("*/", self.pos)
        if end == -1:
            raise HyperlambdaError("unterminated comment", start_line)
        self._advance(end + 2 - self.pos)
        if self._rest_of_line().strip():
            raise HyperlambdaError("content after block comment", self.line)

    def parse(self) -> Node:
        root = Node("")
        stack: List[Tuple[Node, int]] = [(root, -1)]

        while not self._eof():
            indent = 0
            while self._peek(indent) == " ":
                indent += 1
            end = self.text.find("\n", self.pos)
            if end == -1:
                end = len(self.text)
            stripped = self.text[self.pos + indent:end].strip()

            if not stripped or stripped.startswith("//"):
                self._rest_of_line()
                self._skip_newline()
                continue
            self._advance(indent)
            if stripped.startswith("/*"):
                self._skip_block_comment()
                self._skip_newline()
                continue

            if indent % INDENT:
                raise HyperlambdaError(f"indentation of {indent} is not a multiple of {INDENT}", self.line)
            level = indent // INDENT
            while stack[-1][1] >= level:
                stack.pop()
            parent, parent_level = stack[-1]
            if level > parent_level + 1:
                raise HyperlambdaError("node is indented more than one level below its parent", self.line)

            node = self._read_node()
            parent.add(node)
            stack.append((node, level))
            self._skip_newline()

        return root


def parse(text: str) -> Node:
    """Parse Hyperlambda text into a root Node."""
    return HyperlambdaParser(text).parse()


class HyperlambdaLoader(BaseLoader):

    @property
    def extensions(self) -> Set[str]:
        return {".hl"}

    def parse(self, content: str) -> Node:
        return parse(content)
