"""Best-effort structural sniffing of request payloads.

Each grammar is checked independently, so one payload may look like JSON,
XML and Markdown at the same time. Nothing here keeps state between calls.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from xml.etree.ElementTree import ParseError, XMLPullParser

from markdown_it import MarkdownIt

MAX_CLASSIFY_BYTES = 64 * 1024
OVERSIZE_MESSAGE = "Payload too large. Maximum allowed size is 64 KB."

INVALID_ENCODING_DETAIL = "Payload is not valid UTF-8 text."
JSON_DETAIL = "Valid JSON detected."
XML_DETAIL = "Valid XML detected."
MARKDOWN_DETAIL = "Markdown content detected (parsed successfully)."
NO_MARKUP_DETAIL = "No known markup detected (JSON, XML, Markdown)."
CLOSING_DETAIL = "Anyways, it's gone now."

_XML_CHUNK_CHARS = 8 * 1024
_markdown = MarkdownIt("commonmark")


class PayloadTooLargeError(Exception):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(OVERSIZE_MESSAGE)
        self.size = size
        self.limit = limit


@dataclass(frozen=True, slots=True)
class ClassificationReport:
    is_json: bool
    is_xml: bool
    is_markdown: bool
    details: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_json": self.is_json,
            "is_xml": self.is_xml,
            "is_markdown": self.is_markdown,
            "details": list(self.details),
        }


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def looks_like_json(text: str) -> bool:
    """Exactly one JSON value, surrounding whitespace allowed, nothing else.

    Numbers are kept as text so long digit runs are not subject to int
    conversion limits.
    """
    try:
        json.loads(text, parse_int=str, parse_float=str, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False
    return True


def looks_like_xml(text: str) -> bool:
    """Well-formedness only: balanced tags, one root, valid token syntax."""
    parser = XMLPullParser(events=("start", "end"))
    try:
        for offset in range(0, len(text), _XML_CHUNK_CHARS):
            parser.feed(text[offset : offset + _XML_CHUNK_CHARS])
            for _ in parser.read_events():
                pass
        parser.close()
        for _ in parser.read_events():
            pass
    except ParseError:
        return False
    return True


def looks_like_markdown(text: str) -> bool:
    # Plain prose is a Markdown paragraph, so this is true for almost any
    # non-blank text.
    return len(_markdown.parse(text)) > 0


def classify(payload: bytes, max_size: int = MAX_CLASSIFY_BYTES) -> ClassificationReport:
    if len(payload) > max_size:
        raise PayloadTooLargeError(len(payload), max_size)

    try:
        text = payload.decode("utf-8", errors="strict")
    except UnicodeDecodeError:
        return ClassificationReport(
            is_json=False,
            is_xml=False,
            is_markdown=False,
            details=(INVALID_ENCODING_DETAIL,),
        )

    details: list[str] = []

    is_json = looks_like_json(text)
    if is_json:
        details.append(JSON_DETAIL)

    is_xml = looks_like_xml(text)
    if is_xml:
        details.append(XML_DETAIL)

    is_markdown = looks_like_markdown(text)
    if is_markdown:
        details.append(MARKDOWN_DETAIL)

    if not (is_json or is_xml or is_markdown):
        details.append(NO_MARKUP_DETAIL)

    details.append(CLOSING_DETAIL)
    return ClassificationReport(
        is_json=is_json,
        is_xml=is_xml,
        is_markdown=is_markdown,
        details=tuple(details),
    )
