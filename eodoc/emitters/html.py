"""HTML page emission for artifacts, packages and the global index."""

from __future__ import annotations

import os
import shutil
from pathlib import Path, PurePosixPath
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..grouping import INDEX_PAGE, PackageBucket
from ..logging import get_logger
from ..models import Artifact

STYLESHEET_NAME = "styles.css"
_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


class HtmlEmitter:
    """Writes page shells around rendered fragments under one output root."""

    def __init__(self, output_root: Path, *, stylesheet: Path | None = None) -> None:
        self.output_root = Path(output_root)
        self.custom_stylesheet = stylesheet
        self.logger = get_logger("emitters.html")
        self._artifact_pages: set[Path] = set()
        self._env = Environment(
            loader=FileSystemLoader(str(_TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    @property
    def stylesheet_path(self) -> Path:
        return self.output_root / STYLESHEET_NAME

    def write_stylesheet(self) -> Path:
        """Create ``styles.css``, copying the configured stylesheet when present."""
        self.output_root.mkdir(parents=True, exist_ok=True)
        target = self.stylesheet_path
        if self.custom_stylesheet is not None:
            shutil.copyfile(self.custom_stylesheet, target)
        else:
            target.write_text("", encoding="utf-8")
        return target

    def artifact_path(self, artifact: Artifact) -> Path:
        relative = PurePosixPath(artifact.relative)
        return self.output_root.joinpath(*relative.parent.parts, f"{artifact.name}.html")

    def write_artifact(self, artifact: Artifact, fragment: str) -> Path:
        target = self.artifact_path(artifact)
        html = self._render("artifact.html.j2", target, title=artifact.name, fragment=fragment)
        self._artifact_pages.add(target)
        return self._write(target, html)

    def write_package(self, bucket: PackageBucket) -> Path | None:
        """Write the aggregate page of ``bucket``; root and empty buckets have none."""
        if bucket.is_root or not bucket.fragments:
            return None
        target = self.output_root / bucket.page
        self._warn_on_collision(target)
        html = self._render(
            "package.html.j2",
            target,
            title=f"Package {bucket.name} documentation",
            fragments=bucket.fragments,
        )
        return self._write(target, html)

    def write_index(self, fragments: Sequence[str]) -> Path:
        """Write ``packages.html`` holding every fragment of the run."""
        target = self.output_root / INDEX_PAGE
        self._warn_on_collision(target)
        html = self._render(
            "package.html.j2",
            target,
            title="Packages documentation",
            fragments=list(fragments),
        )
        return self._write(target, html)

    def _warn_on_collision(self, target: Path) -> None:
        if target in self._artifact_pages:
            self.logger.warning(
                "Aggregate page %s replaces the artifact page written at the same path", target
            )

    def _render(self, template_name: str, target: Path, **context: object) -> str:
        css_href = Path(os.path.relpath(self.stylesheet_path, target.parent)).as_posix()
        template = self._env.get_template(template_name)
        return template.render(css_href=css_href, **context)

    def _write(self, target: Path, html: str) -> Path:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
        self.logger.debug("Wrote %s", target)
        return target


__all__ = ["HtmlEmitter", "STYLESHEET_NAME"]
