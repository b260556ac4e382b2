"""Quotation template layout and rendering."""

from quotedoc.core import compose, interpolate, layout_sections, resolve_styles

__version__ = "0.1.0"

__all__ = ["compose", "interpolate", "layout_sections", "resolve_styles"]
