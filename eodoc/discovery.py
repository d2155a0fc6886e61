"""Artifact discovery under the parser output directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

from .logging import get_logger
from .models import Artifact

XMIR_SUFFIX = ".xmir"

logger = get_logger("discovery")


def _raise(error: OSError) -> None:
    raise error


def _iter_files(root: Path) -> Iterator[Path]:
    # os.walk skips unreadable directories unless onerror raises.
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
        current_dir = Path(dirpath)
        for filename in filenames:
            if filename.endswith(XMIR_SUFFIX):
                yield current_dir / filename


class ArtifactScanner:
    """Walks an input tree and returns the XMIR artifacts it contains."""

    def scan(self, root: str | Path, *, sort: bool = True) -> List[Artifact]:
        """Return every ``.xmir`` file below ``root``.

        With ``sort`` the result is ordered by relative path segments, which
        makes aggregate pages reproducible across file systems. Without it the
        order is whatever ``os.walk`` reports.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Input directory not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Input path is not a directory: {root}")

        artifacts = [
            Artifact(path=path, relative=path.relative_to(root_path).as_posix())
            for path in _iter_files(root_path)
        ]
        if sort:
            artifacts.sort(key=lambda artifact: tuple(artifact.relative.split("/")))
        logger.debug("Discovered %d artifacts under %s", len(artifacts), root_path)
        return artifacts


__all__ = ["ArtifactScanner", "XMIR_SUFFIX"]
