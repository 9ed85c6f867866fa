"""Minimal parser for the indentation based config format LeanSpec emits.

Only a narrow YAML subset is understood: mappings, sequences (including
sequences of inline objects) and plain or quoted scalars, indented with
exactly two spaces per level. Anchors, flow collections, multi-document
streams and block scalars are not supported.

Duplicate keys inside one mapping are rejected with ``ConfigSyntaxError``
rather than silently overwritten.
"""

from __future__ import annotations

import json
import re
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

INDENT_SIZE = 2
SEQUENCE_PREFIX = "- "

ConfigValue = Union[None, bool, int, float, str, Dict[str, "ConfigValue"], List["ConfigValue"]]

_NUMBER_RE = re.compile(r"^[+-]?[0-9]+(\.[0-9]+)?$")
_LINE_BREAK_RE = re.compile(r"\r?\n")

logger = logging.getLogger("leanspec.config")


class ConfigSyntaxError(ValueError):
    """Raised when a config document does not follow the supported grammar."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        super().__init__(f"{message} (line {line})" if line is not None else message)


@dataclass(slots=True, frozen=True)
class ConfigToken:
    """One significant line of a config document."""

    indent: int
    text: str
    line: int


def tokenize(source: str) -> List[ConfigToken]:
    """Split ``source`` into tokens, dropping blank and comment lines."""
    tokens: List[ConfigToken] = []
    for index, line in enumerate(_LINE_BREAK_RE.split(source)):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        indent = len(line) - len(line.lstrip())
        if indent % INDENT_SIZE != 0:
            raise ConfigSyntaxError("Invalid indentation", index + 1)

        tokens.append(ConfigToken(indent=indent, text=trimmed, line=index + 1))
    return tokens


def parse_scalar(text: str) -> ConfigValue:
    """Decode a bare scalar value."""
    if text in ("~", "null"):
        return None
    if text in ("true", "false"):
        return text == "true"
    match = _NUMBER_RE.match(text)
    if match:
        return float(text) if match.group(1) else int(text)

    if len(text) >= 2 and text.startswith("'") and text.endswith("'"):
        return text[1:-1].replace("''", "'")
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        try:
            decoded = json.loads(text)
        except ValueError:
            return text[1:-1]
        return decoded if isinstance(decoded, str) else text[1:-1]

    return text


def _is_sequence_item(token: ConfigToken) -> bool:
    return token.text.startswith(SEQUENCE_PREFIX) or token.text == "-"


def _split_key_value(text: str, line: int) -> tuple[str, str]:
    key, separator, remainder = text.partition(":")
    if not separator:
        raise ConfigSyntaxError("Expected ':' in mapping", line)
    key = key.strip()
    if not key:
        raise ConfigSyntaxError("Empty mapping key", line)
    return key, remainder.strip()


class _Parser:
    """Recursive descent over a token list with an explicit cursor."""

    def __init__(self, tokens: List[ConfigToken]):
        self.tokens = tokens
        self.index = 0

    def _peek(self) -> Optional[ConfigToken]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def parse_value(self, indent: int) -> ConfigValue:
        token = self._peek()
        if token is None or token.indent < indent:
            return None
        if token.indent > indent:
            raise ConfigSyntaxError("Invalid indentation", token.line)

        if _is_sequence_item(token):
            return self.parse_sequence(indent)
        return self.parse_mapping(indent)

    def _assign(self, target: Dict[str, ConfigValue], key: str, remainder: str, indent: int, line: int) -> None:
        if key in target:
            raise ConfigSyntaxError(f"Duplicate key '{key}'", line)
        if remainder:
            target[key] = parse_scalar(remainder)
        else:
            target[key] = self.parse_value(indent + INDENT_SIZE)

    def parse_properties(self, indent: int, target: Dict[str, ConfigValue]) -> None:
        """Consume mapping entries at ``indent`` into ``target``.

        Stops quietly at a dedent or at a sequence item; the caller decides
        whether that is legal.
        """
        while (token := self._peek()) is not None:
            if token.indent < indent:
                break
            if token.indent > indent:
                raise ConfigSyntaxError("Invalid indentation", token.line)
            if _is_sequence_item(token):
                break

            key, remainder = _split_key_value(token.text, token.line)
            self.index += 1
            self._assign(target, key, remainder, indent, token.line)

    def parse_mapping(self, indent: int) -> Dict[str, ConfigValue]:
        result: Dict[str, ConfigValue] = {}
        self.parse_properties(indent, result)

        token = self._peek()
        if token is not None and token.indent == indent and _is_sequence_item(token):
            raise ConfigSyntaxError("Unexpected list item in mapping", token.line)
        return result

    def parse_sequence(self, indent: int) -> List[ConfigValue]:
        items: List[ConfigValue] = []

        while (token := self._peek()) is not None:
            if token.indent != indent:
                break
            if not _is_sequence_item(token):
                raise ConfigSyntaxError("Expected list item in sequence", token.line)

            remainder = token.text[1:].strip()
            self.index += 1

            if not remainder:
                items.append(self.parse_value(indent + INDENT_SIZE))
                continue

            if ":" in remainder and not _is_quoted(remainder):
                # Inline object: first entry on the dash line, the rest below it
                key, value = _split_key_value(remainder, token.line)
                entry: Dict[str, ConfigValue] = {}
                self._assign(entry, key, value, indent, token.line)
                self.parse_properties(indent + INDENT_SIZE, entry)
                items.append(entry)
                continue

            items.append(parse_scalar(remainder))

        return items


def _is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"')


def parse(source: str) -> ConfigValue:
    """Parse a config document into plain Python values.

    An empty document yields an empty mapping. Raises ``ConfigSyntaxError``
    on any grammar violation; no partial result is returned.
    """
    tokens = tokenize(source)
    if not tokens:
        return {}

    parser = _Parser(tokens)
    value = parser.parse_value(0)

    trailing = parser._peek()
    if trailing is not None:
        raise ConfigSyntaxError("Unexpected content", trailing.line)

    logger.debug("Parsed config document with %d tokens", len(tokens))
    return {} if value is None else value
