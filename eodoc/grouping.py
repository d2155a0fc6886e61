"""Per-run accumulation of fragments and facts by package."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .models import Artifact, ExtractedFacts

INDEX_PAGE = "packages.html"


def package_page_name(package: str) -> str:
    """Return the aggregate page file name for ``package``."""
    return f"package_{package}.html"


@dataclass
class PackageBucket:
    """Fragments and facts of every artifact in one package, in arrival order."""

    name: str
    artifacts: List[Artifact] = field(default_factory=list)
    fragments: List[str] = field(default_factory=list)
    facts: List[ExtractedFacts] = field(default_factory=list)

    @property
    def page(self) -> str:
        return package_page_name(self.name)

    @property
    def is_root(self) -> bool:
        return self.name == ""

    def __len__(self) -> int:
        return len(self.artifacts)


class DocsAccumulator:
    """Collects one run's results; create a fresh instance per run."""

    def __init__(self) -> None:
        self._buckets: Dict[str, PackageBucket] = {}
        self._fragments: List[str] = []

    def add(self, artifact: Artifact, fragment: str, facts: ExtractedFacts) -> PackageBucket:
        """Append an artifact's fragment and facts under its package."""
        bucket = self._buckets.get(artifact.package)
        if bucket is None:
            bucket = PackageBucket(name=artifact.package)
            self._buckets[artifact.package] = bucket
        bucket.artifacts.append(artifact)
        bucket.fragments.append(fragment)
        bucket.facts.append(facts)
        self._fragments.append(fragment)
        return bucket

    @property
    def buckets(self) -> List[PackageBucket]:
        """Buckets in the order their packages were first seen."""
        return list(self._buckets.values())

    @property
    def fragments(self) -> List[str]:
        """Every fragment in overall discovery order."""
        return list(self._fragments)

    def facts_by_package(self) -> Dict[str, List[ExtractedFacts]]:
        return {name: list(bucket.facts) for name, bucket in self._buckets.items()}

    def __len__(self) -> int:
        return len(self._fragments)


__all__ = ["DocsAccumulator", "INDEX_PAGE", "PackageBucket", "package_page_name"]
