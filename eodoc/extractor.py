"""Tolerant fact extraction from raw XMIR text."""

from __future__ import annotations

import codecs
import re
from typing import Callable, Dict, List, Optional, TypeVar

from .logging import get_logger
from .models import METADATA_KEYS, Entity, ExtractedFacts

logger = get_logger("extractor")

_T = TypeVar("_T")

# Tag names must end at whitespace, "/" or ">" so <objects> is not <object>.
_DOCUMENT_TAG = re.compile(r"<object(?=[\s/>])[^>]*>")
_ENTITY_TAG = re.compile(r"<o(?=[\s/>])[^>]*>")
_SHEET = re.compile(r"<sheet>(?P<content>[^<]*)</sheet>")
_DECLARED_ENCODING = re.compile(rb"""^\s*<\?xml[^>]*?encoding\s*=\s*["'](?P<name>[A-Za-z][\w.:-]*)["']""")


def _attribute_pattern(name: str, value: str | None = None, *, flags: int = 0) -> re.Pattern[str]:
    # The lookbehind stops "ms" from matching the tail of a longer name such as "items".
    dq = value or r'[^"]*'
    sq = value or r"[^']*"
    return re.compile(
        rf"""(?<![\w:.-]){name}\s*=\s*(?:"(?P<dq>{dq})"|'(?P<sq>{sq})')""",
        flags,
    )


_METADATA_PATTERNS = {key: _attribute_pattern(key, flags=re.IGNORECASE) for key in METADATA_KEYS}
_NAME = _attribute_pattern("name")
_BASE = _attribute_pattern("base")
_LINE = _attribute_pattern("line", r"\d+")
_POS = _attribute_pattern("pos", r"\d+")


def _value(pattern: re.Pattern[str], tag: str) -> Optional[str]:
    match = pattern.search(tag)
    if match is None:
        return None
    dq = match.group("dq")
    return dq if dq is not None else match.group("sq")


def decode_artifact(raw: bytes) -> str:
    """Decode artifact bytes with the encoding their XML declaration names.

    UTF-8 is used when there is no declaration or the codec is unknown.
    Undecodable bytes become U+FFFD.
    """
    encoding = "utf-8"
    match = _DECLARED_ENCODING.match(raw)
    if match is not None:
        name = match.group("name").decode("ascii")
        try:
            encoding = codecs.lookup(name).name
        except LookupError:
            logger.debug("Unknown declared encoding %s, decoding as UTF-8", name)
    return raw.decode(encoding, errors="replace")


class FactExtractor:
    """Pattern-based scanner producing :class:`ExtractedFacts`.

    The scanner never requires well-formed input. Each of the three partial
    extractions runs on its own; a failure in one is logged and leaves that
    field empty while the others are still reported.
    """

    def extract(self, text: str, *, source: str | None = None) -> ExtractedFacts:
        label = source or "<text>"
        return ExtractedFacts(
            metadata=self._guard("metadata", label, self.extract_metadata, text, {}),
            entities=self._guard("objects", label, self.extract_entities, text, []),
            sheets=self._guard("sheets", label, self.extract_sheets, text, []),
        )

    def extract_metadata(self, text: str) -> Dict[str, str]:
        """Return recognised attributes of the first ``<object>`` tag."""
        match = _DOCUMENT_TAG.search(text)
        if match is None:
            return {}
        tag = match.group(0)
        metadata: Dict[str, str] = {}
        for key, pattern in _METADATA_PATTERNS.items():
            value = _value(pattern, tag)
            if value is not None:
                metadata[key] = value
        return metadata

    def extract_entities(self, text: str) -> List[Entity]:
        """Return one entity per ``<o>`` tag that carries a recognised field."""
        entities: List[Entity] = []
        for match in _ENTITY_TAG.finditer(text):
            tag = match.group(0)
            line = _value(_LINE, tag)
            pos = _value(_POS, tag)
            entity = Entity(
                name=_value(_NAME, tag) or None,
                base=_value(_BASE, tag) or None,
                line=int(line) if line is not None else None,
                pos=int(pos) if pos is not None else None,
            )
            if not entity.is_empty():
                entities.append(entity)
        return entities

    def extract_sheets(self, text: str) -> List[str]:
        """Return applied sheet names in source order, duplicates included."""
        sheets: List[str] = []
        for match in _SHEET.finditer(text):
            content = match.group("content").strip()
            if content:
                sheets.append(content)
        return sheets

    def _guard(
        self,
        section: str,
        label: str,
        func: Callable[[str], _T],
        text: str,
        default: _T,
    ) -> _T:
        try:
            return func(text)
        except Exception as exc:
            logger.warning(
                "Failed to extract %s from %s: %s", section, label, exc, extra={"artifact": label}
            )
            return default


__all__ = ["FactExtractor", "decode_artifact"]
