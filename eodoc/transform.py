"""XSLT rendering of XMIR artifacts into HTML fragments."""

from __future__ import annotations

from pathlib import Path

from lxml import etree

from .logging import get_logger

DEFAULT_STYLESHEET = Path(__file__).with_name("resources") / "xmir-transformer.xsl"

logger = get_logger("transform")


class TransformError(RuntimeError):
    """Raised when an artifact cannot be rendered to HTML."""


class XsltTransformer:
    """Applies one XSLT stylesheet to XMIR documents.

    The stylesheet is compiled lazily on first use and reused for every
    artifact of the run.
    """

    def __init__(self, stylesheet: Path | None = None) -> None:
        self.stylesheet = Path(stylesheet) if stylesheet else DEFAULT_STYLESHEET
        self._xslt: etree.XSLT | None = None
        self._parser = etree.XMLParser(resolve_entities=False, no_network=True)

    def transform(self, xmir: str | bytes, *, source: str | None = None) -> str:
        """Return the HTML fragment rendered from ``xmir``.

        Raw bytes are handed to lxml unchanged so the encoding named in the
        XML declaration applies; text is parsed as UTF-8.
        """
        label = source or "<text>"
        xslt = self.compile()
        try:
            data = xmir if isinstance(xmir, bytes) else xmir.encode("utf-8")
            document = etree.fromstring(data, self._parser)
            result = xslt(document)
        except (etree.XMLSyntaxError, etree.XSLTApplyError, ValueError) as exc:
            raise TransformError(f"Error while applying XSL to {label}: {exc}") from exc
        return str(result)

    def compile(self) -> etree.XSLT:
        """Compile the stylesheet on first call and cache it."""
        if self._xslt is None:
            logger.debug("Compiling stylesheet %s", self.stylesheet)
            try:
                self._xslt = etree.XSLT(etree.parse(str(self.stylesheet)))
            except (OSError, etree.XMLSyntaxError, etree.XSLTParseError) as exc:
                raise TransformError(f"Cannot load stylesheet {self.stylesheet}: {exc}") from exc
        return self._xslt


__all__ = ["DEFAULT_STYLESHEET", "TransformError", "XsltTransformer"]
