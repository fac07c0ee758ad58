"""Canonical formatting of block syntax.

The renderer emits raw, unindented text. This module parses that text into a
small syntax tree and prints it back in canonical form:

- two spaces of indentation per nesting level
- "=" aligned across consecutive single-line attributes
- a blank line between multi-line items (blocks, multi-line lists) and
  their neighbours
- multi-line lists print one element per line with a trailing comma
- empty lists print as "[]" and empty blocks as "name {}"

Anything that does not parse raises FormatError carrying the raw text.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from terraconf.exceptions import FormatError

INDENT = "  "

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<NEWLINE>\n)
  | (?P<SPACE>[ \t\r]+)
  | (?P<STRING>"(?:[^"\\\n]|\\.)*")
  | (?P<NUMBER>-?[0-9]+(?:\.[0-9]+)?)
  | (?P<WORD>[A-Za-z_][A-Za-z0-9_-]*)
  | (?P<LBRACE>\{)
  | (?P<RBRACE>\})
  | (?P<LBRACK>\[)
  | (?P<RBRACK>\])
  | (?P<COMMA>,)
  | (?P<EQUALS>=)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int


@dataclass
class ListExpr:
    """A list of expressions; multiline if the source broke it over lines."""

    items: list["Expr"] = field(default_factory=list)
    multiline: bool = False


# Literal tokens (strings, numbers, bare words) are kept as their source text
Expr = Union[str, ListExpr]


@dataclass
class Attribute:
    key: str
    value: Expr


@dataclass
class Block:
    key: str
    labels: list[str] = field(default_factory=list)
    body: list[Union[Attribute, "Block"]] = field(default_factory=list)


Item = Union[Attribute, Block]


def tokenize(text: str) -> Iterator[Token]:
    """Split block text into tokens, dropping horizontal whitespace.

    Raises:
        FormatError: On characters that cannot start a token, including
            unterminated strings
    """
    line = 1
    pos = 0
    while pos < len(text):
        match = _TOKEN_PATTERN.match(text, pos)
        if match is None:
            char = text[pos]
            reason = "unterminated string" if char == '"' else f"unexpected character {char!r}"
            raise FormatError(text, reason, line)
        kind = match.lastgroup
        if kind != "SPACE":
            yield Token(kind, match.group(), line)
        if kind == "NEWLINE":
            line += 1
        pos = match.end()


class _Parser:
    """Recursive descent parser over the token stream."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = list(tokenize(text))
        self.pos = 0

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def error(self, reason: str) -> FormatError:
        token = self.peek()
        line = token.line if token else (self.tokens[-1].line if self.tokens else 1)
        return FormatError(self.text, reason, line)

    def next(self, *kinds: str) -> Token:
        token = self.peek()
        if token is None:
            raise self.error(f"unexpected end of input, expected {' or '.join(kinds)}")
        if token.kind not in kinds:
            raise self.error(f"unexpected {token.text!r}, expected {' or '.join(kinds)}")
        self.pos += 1
        return token

    def at(self, *kinds: str) -> bool:
        token = self.peek()
        return token is not None and token.kind in kinds

    def skip_newlines(self) -> bool:
        skipped = False
        while self.at("NEWLINE"):
            self.pos += 1
            skipped = True
        return skipped

    def parse_body(self, nested: bool) -> list[Item]:
        items: list[Item] = []
        while True:
            self.skip_newlines()
            if self.peek() is None:
                if nested:
                    raise self.error("unexpected end of input, expected '}'")
                return items
            if self.at("RBRACE"):
                if not nested:
                    raise self.error("unexpected '}'")
                return items
            items.append(self.parse_item())

    def parse_item(self) -> Item:
        token = self.next("WORD", "STRING")
        key = token.text
        labels = []
        # Quoted keys take no labels
        while token.kind == "WORD" and self.at("STRING"):
            labels.append(self.next("STRING").text)

        if not labels and self.at("EQUALS"):
            self.pos += 1
            value = self.parse_expr()
            if not self.at("NEWLINE", "RBRACE") and self.peek() is not None:
                raise self.error(f"unexpected {self.peek().text!r} after value of '{key}'")
            return Attribute(key, value)

        self.next("LBRACE")
        body = self.parse_body(nested=True)
        self.next("RBRACE")
        return Block(key, labels, body)

    def parse_expr(self) -> Expr:
        if self.at("LBRACK"):
            return self.parse_list()
        return self.next("STRING", "NUMBER", "WORD").text

    def parse_list(self) -> ListExpr:
        self.next("LBRACK")
        result = ListExpr()
        while True:
            if self.skip_newlines():
                result.multiline = True
            if self.at("RBRACK"):
                break
            result.items.append(self.parse_expr())
            if self.skip_newlines():
                result.multiline = True
            if self.at("COMMA"):
                self.pos += 1
                continue
            if not self.at("RBRACK"):
                raise self.error("expected ',' or ']' in list")
        self.next("RBRACK")
        return result


def parse(text: str) -> list[Item]:
    """Parse block text into a list of top-level items.

    Raises:
        FormatError: If the text is not valid block syntax
    """
    return _Parser(text).parse_body(nested=False)


def _render_inline(expr: Expr) -> str:
    if isinstance(expr, ListExpr):
        return "[" + ", ".join(_render_inline(item) for item in expr.items) + "]"
    return expr


def _is_multiline(item: Item) -> bool:
    if isinstance(item, Block):
        return True
    value = item.value
    return isinstance(value, ListExpr) and value.multiline and bool(value.items)


def _print_aligned(group: list[Attribute], depth: int) -> list[str]:
    if not group:
        return []
    width = max(len(attribute.key) for attribute in group)
    indent = INDENT * depth
    return [
        f"{indent}{attribute.key.ljust(width)} = {_render_inline(attribute.value)}"
        for attribute in group
    ]


def _print_multiline(item: Item, depth: int) -> list[str]:
    indent = INDENT * depth
    if isinstance(item, Block):
        header = " ".join([item.key, *item.labels])
        if not item.body:
            return [f"{indent}{header} {{}}"]
        return [f"{indent}{header} {{", *_print_body(item.body, depth + 1), f"{indent}}}"]

    lines = [f"{indent}{item.key} = ["]
    lines.extend(f"{indent}{INDENT}{_render_inline(element)}," for element in item.value.items)
    lines.append(f"{indent}]")
    return lines


def _print_body(items: list[Item], depth: int) -> list[str]:
    lines: list[str] = []
    group: list[Attribute] = []
    after_multiline = False

    for item in items:
        if _is_multiline(item):
            lines.extend(_print_aligned(group, depth))
            group = []
            if lines:
                lines.append("")
            lines.extend(_print_multiline(item, depth))
            after_multiline = True
        else:
            if after_multiline:
                lines.append("")
                after_multiline = False
            group.append(item)

    lines.extend(_print_aligned(group, depth))
    return lines


def format_block(text: str) -> str:
    """Format raw block syntax into canonical text.

    Args:
        text: Raw block text

    Returns:
        Canonical text ending with a single newline ("" for blank input)

    Raises:
        FormatError: If the text is not valid block syntax; the error keeps
            the raw text

    Examples:
        >>> print(format_block('widget "a" {\\nname = "x"\\nsize = 3\\n}\\n'), end="")
        widget "a" {
          name = "x"
          size = 3
        }
    """
    items = parse(text)
    if not items:
        return ""
    return "\n".join(_print_body(items, 0)) + "\n"
