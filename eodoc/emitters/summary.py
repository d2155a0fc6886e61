"""Hierarchical XML summary of packages, artifacts, objects and sheets."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List

from ..logging import get_logger
from ..models import METADATA_KEYS, ExtractedFacts

SUMMARY_NAME = "summary.xml"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'

# Characters outside the XML 1.0 Char production.
_ILLEGAL_XML_CHARS = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


class SummaryValidationError(ValueError):
    """Raised when the package mapping cannot be turned into a summary."""


def _clean(value: str) -> str:
    return _ILLEGAL_XML_CHARS.sub("", value)


class SummaryBuilder:
    """Builds ``summary.xml`` from per-package extracted facts."""

    def __init__(self, *, indent: str = "  ") -> None:
        self.indent = indent
        self.logger = get_logger("emitters.summary")

    def validate(self, packages: Any) -> None:
        """Fail fast when ``packages`` is not a mapping of name to facts list."""
        if not isinstance(packages, Mapping):
            raise SummaryValidationError("Invalid packages data provided")
        for name, facts in packages.items():
            if not isinstance(name, str):
                raise SummaryValidationError(f"Invalid package name: {name!r}")
            if not isinstance(facts, list):
                raise SummaryValidationError(f"Invalid XMIR data for package: {name}")
            for entry in facts:
                if not isinstance(entry, ExtractedFacts):
                    raise SummaryValidationError(
                        f"Invalid XMIR data for package: {name} ({type(entry).__name__})"
                    )

    def build_tree(self, packages: Mapping[str, List[ExtractedFacts]]) -> ET.Element:
        self.validate(packages)
        root = ET.Element("eodoc")
        for name, facts in packages.items():
            if not facts:
                self.logger.debug("Skipping empty package %r", name)
                continue
            package = ET.SubElement(root, "package", name=_clean(name))
            for entry in facts:
                self._append_object(package, entry)
        return root

    def build(self, packages: Mapping[str, List[ExtractedFacts]]) -> str:
        """Return the serialised summary document."""
        root = self.build_tree(packages)
        ET.indent(root, space=self.indent)
        body = ET.tostring(root, encoding="unicode")
        return f"{XML_HEADER}\n{body}\n"

    def write(self, packages: Mapping[str, List[ExtractedFacts]], path: Path) -> Path:
        content = self.build(packages)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def _append_object(self, package: ET.Element, facts: ExtractedFacts) -> None:
        element = ET.SubElement(package, "object")

        if facts.metadata:
            metadata = ET.SubElement(element, "metadata")
            for key in METADATA_KEYS:
                if key in facts.metadata:
                    ET.SubElement(metadata, key).text = _clean(facts.metadata[key])

        if facts.entities:
            objects = ET.SubElement(element, "objects")
            for entity in facts.entities:
                attrs = {key: _clean(value) for key, value in entity.attributes().items()}
                ET.SubElement(objects, "o", attrs)

        if facts.sheets:
            sheets = ET.SubElement(element, "sheets")
            for sheet in facts.sheets:
                ET.SubElement(sheets, "sheet").text = _clean(sheet)


__all__ = ["SUMMARY_NAME", "SummaryBuilder", "SummaryValidationError", "XML_HEADER"]
