"""Minimal SCSS structure parser and serializer.

Only statement structure is recognized: rules, at-rules, declarations and
comments. Values, selectors and at-rule parameters are kept as raw text.
Strings, parentheses, ``#{}`` interpolation and ``${}`` color placeholders are
honored when looking for statement boundaries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Union

from copyous.errors import ErrorCode, ThemeError

INDENT = "  "

_AT_RULE_RE = re.compile(r"^@([\w-]+)\s*(.*)$", re.DOTALL)
# Interpolation and template placeholders both nest a brace pair.
_OPENERS = ("#{", "${")


@dataclass(slots=True)
class Comment:
    text: str
    line: int = 0


@dataclass(slots=True)
class Declaration:
    prop: str
    value: str
    line: int = 0


@dataclass(slots=True)
class AtRule:
    name: str
    params: str
    nodes: list[Node] | None = None
    line: int = 0


@dataclass(slots=True)
class Rule:
    selector: str
    nodes: list[Node] = field(default_factory=list)
    line: int = 0


Node = Union[Comment, Declaration, AtRule, Rule]


@dataclass(slots=True)
class Stylesheet:
    nodes: list[Node]
    source: Path | None = None


def parse(text: str, source: Path | None = None) -> Stylesheet:
    """Parse SCSS text into a Stylesheet tree."""
    return Stylesheet(nodes=_Parser(text, source).parse(), source=source)


def parse_file(path: Path) -> Stylesheet:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ThemeError(ErrorCode.RESOURCE_NOT_FOUND, path=path) from exc
    except UnicodeDecodeError as exc:
        raise ThemeError(ErrorCode.DECODE_FAILED, path=path, details={"original": str(exc)}) from exc
    except OSError as exc:
        raise ThemeError(ErrorCode.FILE_READ_FAILED, path=path, details={"original": str(exc)}) from exc
    return parse(text, source=path)


def serialize(nodes: Stylesheet | list[Node]) -> str:
    """Render nodes back to SCSS text, two-space indented."""
    if isinstance(nodes, Stylesheet):
        nodes = nodes.nodes
    lines: list[str] = []
    _render(nodes, 0, lines)
    return "\n".join(lines) + "\n" if lines else ""


def walk(nodes: list[Node]) -> Iterator[Node]:
    """Yield every node depth-first, parents before children."""
    for node in nodes:
        yield node
        children = _children(node)
        if children:
            yield from walk(children)


def prune(nodes: list[Node], predicate: Callable[[Node], bool]) -> list[Node]:
    """Return ``nodes`` without any node (at any depth) matching ``predicate``."""
    kept: list[Node] = []
    for node in nodes:
        if predicate(node):
            continue
        if isinstance(node, Rule):
            node.nodes = prune(node.nodes, predicate)
        elif isinstance(node, AtRule) and node.nodes is not None:
            node.nodes = prune(node.nodes, predicate)
        kept.append(node)
    return kept


def _children(node: Node) -> list[Node] | None:
    if isinstance(node, (Rule, AtRule)):
        return node.nodes
    return None


def _render(nodes: list[Node], depth: int, lines: list[str]) -> None:
    pad = INDENT * depth
    for node in nodes:
        if isinstance(node, Declaration):
            lines.append(f"{pad}{node.prop}: {node.value};")
        elif isinstance(node, Comment):
            lines.append(f"{pad}/* {node.text} */")
        elif isinstance(node, AtRule):
            head = f"@{node.name} {_squash(node.params)}".rstrip()
            if node.nodes is None:
                lines.append(f"{pad}{head};")
            else:
                lines.append(f"{pad}{head} {{")
                _render(node.nodes, depth + 1, lines)
                lines.append(f"{pad}}}")
        else:
            lines.append(f"{pad}{_squash(node.selector)} {{")
            _render(node.nodes, depth + 1, lines)
            lines.append(f"{pad}}}")


def _squash(text: str) -> str:
    """Collapse whitespace runs to one space, leaving quoted strings intact."""
    out: list[str] = []
    quote = ""
    pending_space = False
    i = 0
    while i < len(text):
        char = text[i]
        if quote:
            out.append(char)
            if char == "\\" and i + 1 < len(text):
                out.append(text[i + 1])
                i += 2
                continue
            if char == quote:
                quote = ""
        elif char.isspace():
            pending_space = bool(out)
        else:
            if pending_space:
                out.append(" ")
                pending_space = False
            if char in "\"'":
                quote = char
            out.append(char)
        i += 1
    return "".join(out)


class _Parser:
    def __init__(self, text: str, source: Path | None) -> None:
        self._text = text
        self._source = source
        self._pos = 0

    def parse(self) -> list[Node]:
        return self._parse_block(opened_at=None)

    def _parse_block(self, opened_at: int | None) -> list[Node]:
        text = self._text
        nodes: list[Node] = []
        while True:
            self._skip_whitespace()
            if self._pos >= len(text):
                if opened_at is not None:
                    raise self._error("Unclosed block", opened_at)
                return nodes
            if text.startswith("/*", self._pos):
                nodes.append(self._read_block_comment())
                continue
            if text.startswith("//", self._pos):
                nodes.append(self._read_line_comment())
                continue
            char = text[self._pos]
            if char == "}":
                if opened_at is None:
                    raise self._error("Unexpected '}'", self._line())
                self._pos += 1
                return nodes
            if char == ";":
                self._pos += 1
                continue
            nodes.append(self._parse_statement())

    def _parse_statement(self) -> Node:
        line = self._line()
        head, terminator = self._scan_statement()
        if terminator == "{":
            self._pos += 1
            children = self._parse_block(opened_at=line)
            if head.startswith("@"):
                name, params = self._split_at_rule(head, line)
                return AtRule(name, params, children, line)
            return Rule(head, children, line)

        if terminator == ";":
            self._pos += 1
        if head.startswith("@"):
            name, params = self._split_at_rule(head, line)
            return AtRule(name, params, None, line)
        index = _find_colon(head)
        if index < 0:
            raise self._error(f"Unknown word {head!r}", line)
        return Declaration(head[:index].strip(), head[index + 1:].strip(), line)

    def _scan_statement(self) -> tuple[str, str]:
        """Collect statement text up to an unnested ``{``, ``;`` or ``}``.

        Comments inside the statement are dropped.
        """
        text = self._text
        length = len(text)
        start_line = self._line()
        out: list[str] = []
        quote = ""
        parens = 0
        interpolation = 0
        i = self._pos
        while i < length:
            char = text[i]
            if quote:
                out.append(char)
                if char == "\\" and i + 1 < length:
                    out.append(text[i + 1])
                    i += 2
                    continue
                if char == quote:
                    quote = ""
                i += 1
                continue
            if char in "\"'":
                quote = char
            elif text.startswith("/*", i):
                end = text.find("*/", i + 2)
                if end < 0:
                    raise self._error("Unclosed comment", self._line_at(i))
                i = end + 2
                continue
            elif text.startswith("//", i) and parens == 0:
                end = text.find("\n", i)
                i = length if end < 0 else end
                continue
            elif text.startswith(_OPENERS, i):
                interpolation += 1
                out.append(text[i:i + 2])
                i += 2
                continue
            elif char == "}" and interpolation:
                interpolation -= 1
            elif char == "(":
                parens += 1
            elif char == ")":
                parens = max(parens - 1, 0)
            elif parens == 0 and char in "{;}":
                self._pos = i
                return "".join(out).strip(), char
            out.append(char)
            i += 1
        if quote:
            raise self._error("Unclosed string", start_line)
        self._pos = length
        return "".join(out).strip(), ""

    def _read_block_comment(self) -> Comment:
        line = self._line()
        end = self._text.find("*/", self._pos + 2)
        if end < 0:
            raise self._error("Unclosed comment", line)
        body = self._text[self._pos + 2:end].strip()
        self._pos = end + 2
        return Comment(body, line)

    def _read_line_comment(self) -> Comment:
        line = self._line()
        end = self._text.find("\n", self._pos)
        if end < 0:
            end = len(self._text)
        body = self._text[self._pos + 2:end].strip()
        self._pos = end
        return Comment(body, line)

    def _skip_whitespace(self) -> None:
        text = self._text
        while self._pos < len(text) and text[self._pos].isspace():
            self._pos += 1

    def _split_at_rule(self, head: str, line: int) -> tuple[str, str]:
        match = _AT_RULE_RE.match(head)
        if match is None:
            raise self._error(f"Malformed at-rule {head!r}", line)
        return match.group(1), match.group(2).strip()

    def _line(self) -> int:
        return self._line_at(self._pos)

    def _line_at(self, index: int) -> int:
        return self._text.count("\n", 0, index) + 1

    def _error(self, message: str, line: int) -> ThemeError:
        return ThemeError(
            ErrorCode.SCSS_SYNTAX,
            message=f"{message} at line {line}",
            path=self._source,
            details={"line": line},
        )


def _find_colon(head: str) -> int:
    """Index of the first ``:`` outside strings, interpolation and placeholders."""
    quote = ""
    interpolation = 0
    i = 0
    while i < len(head):
        char = head[i]
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif head.startswith(_OPENERS, i):
            interpolation += 1
            i += 2
            continue
        elif char == "}" and interpolation:
            interpolation -= 1
        elif char == ":" and not interpolation:
            return i
        i += 1
    return -1
