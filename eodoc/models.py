"""Core data models shared across eodoc components."""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional

METADATA_KEYS = ("author", "version", "time", "dob", "revision", "ms")
ENTITY_FIELDS = ("name", "base", "line", "pos")


@dataclass(frozen=True)
class Artifact:
    """A discovered XMIR file."""

    path: Path
    relative: str

    @property
    def name(self) -> str:
        """File name without the extension."""
        return PurePosixPath(self.relative).stem

    @property
    def package(self) -> str:
        """Dot-joined directory segments, empty for root-level artifacts."""
        return package_name(self.relative)


@dataclass
class Entity:
    """Declared object found in an artifact; absent fields stay ``None``."""

    name: Optional[str] = None
    base: Optional[str] = None
    line: Optional[int] = None
    pos: Optional[int] = None

    def is_empty(self) -> bool:
        return all(getattr(self, key) is None for key in ENTITY_FIELDS)

    def attributes(self) -> Dict[str, str]:
        """Return retained fields in canonical order, stringified."""
        attrs: Dict[str, str] = {}
        for key in ENTITY_FIELDS:
            value = getattr(self, key)
            if value is not None:
                attrs[key] = str(value)
        return attrs


@dataclass
class ExtractedFacts:
    """Best-effort index of one artifact: metadata, entities and sheets."""

    metadata: Dict[str, str] = field(default_factory=dict)
    entities: List[Entity] = field(default_factory=list)
    sheets: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.metadata or self.entities or self.sheets)


def package_name(relative: str) -> str:
    """Map a POSIX relative artifact path to its dotted package name."""
    return ".".join(PurePosixPath(relative).parent.parts)
