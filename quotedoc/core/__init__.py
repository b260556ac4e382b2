from quotedoc.core.compose import compose, paginate
from quotedoc.core.document import Document, Page, PageRegion
from quotedoc.core.interpolate import VOCABULARY, interpolate, tokenize
from quotedoc.core.sections import LayoutMetrics, SectionOutput, layout_sections
from quotedoc.core.styles import ComputedStyleSheet, resolve_styles

__all__ = [
    "ComputedStyleSheet",
    "Document",
    "LayoutMetrics",
    "Page",
    "PageRegion",
    "SectionOutput",
    "VOCABULARY",
    "compose",
    "interpolate",
    "layout_sections",
    "paginate",
    "resolve_styles",
    "tokenize",
]
