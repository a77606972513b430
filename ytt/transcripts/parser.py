# ytt/transcripts/parser.py
"""
Caption document parser.
Single responsibility: decode a fetched timedtext XML body into ordered TranscriptItems.

Two cue dialects are recognised per element:
- `text` elements: `start`/`dur` attributes in decimal seconds
- `p` elements: `t`/`d` attributes in integer milliseconds, with nested
  `s`/`br` markers collapsed to a single space

Text is XML-unescaped by the XML parser, then passed through
decode_html_entities(). Document order is preserved; nothing is re-sorted.
"""

from __future__ import annotations

import math
import re
import sys
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional
from xml.etree.ElementTree import Element, ParseError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from ytt.transcripts.errors import XmlParseError
from ytt.transcripts.schema import TranscriptItem


NAMED_ENTITIES: Dict[str, str] = {
    "quot": '"',
    "amp": "&",
    "apos": "'",
    "lt": "<",
    "gt": ">",
    "nbsp": " ",
}

ENTITY_REGEX = re.compile(r"&(#[xX][0-9A-Fa-f]+|#[0-9]+|[A-Za-z][A-Za-z0-9]*);")
SURROGATE_RANGE = (0xD800, 0xDFFF)


def _decode_entity(match: re.Match) -> str:
    entity = match.group(1)
    if entity in NAMED_ENTITIES:
        return NAMED_ENTITIES[entity]

    try:
        if entity[:2] in ("#x", "#X"):
            code_point = int(entity[2:], 16)
        elif entity.startswith("#"):
            code_point = int(entity[1:])
        else:
            return match.group(0)
    except ValueError:
        return match.group(0)  # Beyond the integer digit limit

    # Surrogates and values past U+10FFFF are not characters: emitted verbatim
    if SURROGATE_RANGE[0] <= code_point <= SURROGATE_RANGE[1] or code_point > sys.maxunicode:
        return match.group(0)
    return chr(code_point)


def decode_html_entities(text: str) -> str:
    """
    Decode the HTML entities YouTube leaves in caption text.

    Known names, decimal and hex references are decoded; anything else is
    re-emitted verbatim as `&name;`.
    """
    return ENTITY_REGEX.sub(_decode_entity, text)


@dataclass(frozen=True)
class CueDialect:
    """Attribute-extraction rule for one cue element type."""
    tag: str
    start_attr: str
    duration_attr: str
    units_per_second: float
    break_tags: FrozenSet[str] = frozenset()

    def seconds(self, element: Element, attr: str) -> float:
        raw = element.get(attr)
        if raw is None:
            return 0.0
        try:
            value = float(raw) / self.units_per_second
        except ValueError:
            return 0.0
        if not math.isfinite(value) or value < 0:
            return 0.0
        return value

    def text(self, element: Element) -> str:
        buffer: List[str] = []
        self._collect(element, buffer)
        return "".join(buffer)

    def _append(self, buffer: List[str], fragment: Optional[str]) -> None:
        if not fragment:
            return
        text = decode_html_entities(fragment)
        # Word segments carry their own leading space; keep a single one
        if self.break_tags and buffer and buffer[-1].endswith(" "):
            text = text.lstrip(" ")
        if text:
            buffer.append(text)

    def _collect(self, element: Element, buffer: List[str]) -> None:
        self._append(buffer, element.text)
        for child in element:
            if child.tag in self.break_tags and not (buffer and buffer[-1].endswith(" ")):
                buffer.append(" ")
            self._collect(child, buffer)
            self._append(buffer, child.tail)

    def to_item(self, element: Element) -> Optional[TranscriptItem]:
        text = self.text(element).strip()
        if not text:
            return None
        return TranscriptItem(
            text=text,
            start=self.seconds(element, self.start_attr),
            duration=self.seconds(element, self.duration_attr),
        )


TEXT_DIALECT = CueDialect(tag="text", start_attr="start", duration_attr="dur", units_per_second=1.0)
PARAGRAPH_DIALECT = CueDialect(
    tag="p",
    start_attr="t",
    duration_attr="d",
    units_per_second=1000.0,
    break_tags=frozenset({"s", "br"}),
)

DIALECTS: Dict[str, CueDialect] = {d.tag: d for d in (TEXT_DIALECT, PARAGRAPH_DIALECT)}


class TranscriptParser:
    """Parses timedtext XML documents into TranscriptItems."""

    def __init__(self, preserve_formatting: bool = False) -> None:
        # Reserved for a mode that keeps inline styling markers
        self._preserve_formatting = preserve_formatting

    def parse(self, xml: str) -> List[TranscriptItem]:
        """
        Parse a caption document.

        Returns an empty list for an empty body.
        Raises XmlParseError on malformed or unterminated documents.
        """
        if not xml.strip():
            return []

        try:
            root = fromstring(xml)
        except (ParseError, DefusedXmlException) as exc:
            raise XmlParseError(str(exc)) from exc

        items: List[TranscriptItem] = []
        self._walk(root, items)
        return items

    def _walk(self, element: Element, items: List[TranscriptItem]) -> None:
        dialect = DIALECTS.get(element.tag)
        if dialect is not None:
            item = dialect.to_item(element)
            if item is not None:
                items.append(item)
            return

        for child in element:
            self._walk(child, items)
