"""Writers for the HTML pages and the XML summary."""

from .html import STYLESHEET_NAME, HtmlEmitter
from .summary import SUMMARY_NAME, SummaryBuilder, SummaryValidationError

__all__ = [
    "HtmlEmitter",
    "STYLESHEET_NAME",
    "SUMMARY_NAME",
    "SummaryBuilder",
    "SummaryValidationError",
]
