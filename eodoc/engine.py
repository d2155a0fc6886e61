"""Pipeline orchestration for the docs command."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .config import DocsConfig, load_config
from .discovery import ArtifactScanner
from .emitters.html import HtmlEmitter
from .emitters.summary import SUMMARY_NAME, SummaryBuilder
from .extractor import FactExtractor, decode_artifact
from .grouping import DocsAccumulator
from .logging import get_logger
from .models import Artifact
from .transform import TransformError, XsltTransformer

_FAILED_FRAGMENT = '<section class="xmir xmir-failed"><p>Documentation for {name} is unavailable.</p></section>'


@dataclass
class DocsResult:
    """Outcome of a documentation run."""

    output_dir: Path
    summary_path: Path
    artifacts: int
    packages: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class DocsEngine:
    """Turns a parser output tree into HTML pages and an XML summary."""

    def __init__(
        self,
        config: DocsConfig | None = None,
        scanner: ArtifactScanner | None = None,
        extractor: FactExtractor | None = None,
        transformer: XsltTransformer | None = None,
        summary_builder: SummaryBuilder | None = None,
    ) -> None:
        self.config = config
        self.scanner = scanner or ArtifactScanner()
        self.extractor = extractor or FactExtractor()
        self._transformer = transformer
        self.summary_builder = summary_builder or SummaryBuilder()
        self.logger = get_logger("engine")

    def run(self, target: str | Path) -> DocsResult:
        """Regenerate every output for the project at ``target``."""
        target_path = Path(target).expanduser().resolve()
        config = self.config or load_config(target_path)
        input_dir = target_path / config.input_dir
        output_dir = target_path / config.output_dir
        self.logger.info("Generating documentation for %s", target_path)

        artifacts = self.scanner.scan(input_dir, sort=config.sort)
        transformer = self._resolve_transformer(config)
        transformer.compile()

        emitter = HtmlEmitter(output_dir, stylesheet=config.stylesheet)
        emitter.write_stylesheet()

        accumulator = DocsAccumulator()
        failed: List[str] = []

        for artifact in artifacts:
            self.logger.debug("Processing %s", artifact.relative, extra={"artifact": artifact.relative})
            raw = artifact.path.read_bytes()
            fragment = self._render(transformer, artifact, raw, config, failed)
            text = decode_artifact(raw)
            facts = self.extractor.extract(text, source=artifact.relative)
            emitter.write_artifact(artifact, fragment)
            accumulator.add(artifact, fragment, facts)

        for bucket in accumulator.buckets:
            emitter.write_package(bucket)
        emitter.write_index(accumulator.fragments)

        summary_path = self.summary_builder.write(
            accumulator.facts_by_package(), output_dir / SUMMARY_NAME
        )

        self.logger.info("Documentation generation completed in the %s directory", output_dir)
        self.logger.info("XML summary generated at %s", summary_path)
        if failed:
            self.logger.warning("%d artifacts could not be rendered: %s", len(failed), ", ".join(failed))

        return DocsResult(
            output_dir=output_dir,
            summary_path=summary_path,
            artifacts=len(accumulator),
            packages=[bucket.name for bucket in accumulator.buckets],
            failed=failed,
        )

    def _resolve_transformer(self, config: DocsConfig) -> XsltTransformer:
        if self._transformer is not None:
            return self._transformer
        return XsltTransformer(config.transformer)

    def _render(
        self,
        transformer: XsltTransformer,
        artifact: Artifact,
        raw: bytes,
        config: DocsConfig,
        failed: List[str],
    ) -> str:
        try:
            return transformer.transform(raw, source=artifact.relative)
        except TransformError as exc:
            if config.on_transform_error != "skip":
                raise
            self.logger.warning(
                "Skipping %s: %s", artifact.relative, exc, extra={"artifact": artifact.relative}
            )
            failed.append(artifact.relative)
            return _FAILED_FRAGMENT.format(name=html.escape(artifact.name))


__all__ = ["DocsEngine", "DocsResult"]
