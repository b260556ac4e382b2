# quotedoc/core/styles.py
"""
Style resolver: template style tokens -> concrete style sheet.

Pure mapping without error conditions. Values outside the supported sets
fall back to the documented defaults; the tenant's customCSS is appended
after the generated rules so it always wins the cascade.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from quotedoc.schemas.template import BorderStyle, TemplateStyles

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "Inter, sans-serif"
DEFAULT_FONT_SIZE = "12px"
DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_SECONDARY_COLOR = "#1E40AF"
DEFAULT_BACKGROUND_COLOR = "#ffffff"

# first family name (lower case) -> declaration
FONT_FAMILIES: Dict[str, str] = {
    "inter": "Inter, sans-serif",
    "arial": "Arial, sans-serif",
    "helvetica": "Helvetica, sans-serif",
    "times new roman": "Times New Roman, serif",
    "georgia": "Georgia, serif",
    "courier new": "Courier New, monospace",
}

FONT_SIZES = (10, 11, 12, 13, 14, 16)

LINE_HEIGHT = 1.5
ROW_STRIPE_COLOR = "#f9fafb"
TABLE_BORDER_COLOR = "#ddd"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_COLOR = re.compile(r"^(?:rgb|rgba|hsl|hsla)\(\s*[0-9.,%\s/]+\)$", re.I)
_NAMED_COLOR = re.compile(r"^[a-zA-Z]{3,24}$")


class ComputedStyleSheet(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_family: str
    font_size: str
    font_px: int
    line_height_px: float
    primary_color: str
    secondary_color: str
    background_color: str
    border_style: str
    table_borders: bool
    alternate_row_colors: bool
    rules: str
    custom_css: str = ""

    @computed_field
    @property
    def css(self) -> str:
        """Generated rules followed by the custom CSS (last write wins)."""
        if not self.custom_css.strip():
            return self.rules
        return self.rules + "\n/* custom */\n" + self.custom_css

    def section_style(self) -> str:
        """Inline style carried by every section block."""
        return (
            f"--primary-color: {self.primary_color}; "
            f"--secondary-color: {self.secondary_color}; "
            f"font-family: {self.font_family}; "
            f"font-size: {self.font_size};"
        )


def resolve_font_family(value: Any) -> str:
    """Match on the first family of a comma list: 'Inter, -apple-system, sans-serif' -> 'Inter, sans-serif'."""
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_FONT_FAMILY
    first = value.split(",")[0].strip().strip("'\"").lower()
    family = FONT_FAMILIES.get(first)
    if family is None:
        logger.debug("Unsupported font family %r, using %s", value, DEFAULT_FONT_FAMILY)
        return DEFAULT_FONT_FAMILY
    return family


def resolve_font_px(value: Any) -> int:
    """'14px', '14' or 14 -> 14 when supported, else 12."""
    if isinstance(value, bool):
        return int(DEFAULT_FONT_SIZE[:-2])
    text = str(value or "").strip().lower()
    if text.endswith("px"):
        text = text[:-2].strip()
    try:
        px = float(text)
    except ValueError:
        return int(DEFAULT_FONT_SIZE[:-2])
    if px.is_integer() and int(px) in FONT_SIZES:
        return int(px)
    logger.debug("Unsupported font size %r, using %s", value, DEFAULT_FONT_SIZE)
    return int(DEFAULT_FONT_SIZE[:-2])


def resolve_color(value: Any, default: str) -> str:
    if not isinstance(value, str):
        return default
    text = value.strip()
    if _HEX_COLOR.match(text) or _FUNC_COLOR.match(text) or _NAMED_COLOR.match(text):
        return text
    return default


def _border_style(value: Any) -> str:
    if isinstance(value, BorderStyle):
        return value.value
    try:
        return BorderStyle(str(value).strip().lower()).value
    except ValueError:
        return BorderStyle.SOLID.value


def _compile_rules(
    *,
    font_family: str,
    font_size: str,
    primary: str,
    secondary: str,
    background: str,
    border_style: str,
    table_borders: bool,
    alternate_rows: bool,
) -> str:
    border_width = "3px" if border_style == "double" else "1px"
    cell_border = f"border: {border_width} {border_style} {TABLE_BORDER_COLOR};" if table_borders else "border: none;"

    rules = [
        f"body {{ font-family: {font_family}; font-size: {font_size}; color: #333; "
        f"line-height: {LINE_HEIGHT}; margin: 0; padding: 0; background-color: {background}; }}",
        ".quotation-page { break-after: page; page-break-after: always; }",
        ".quotation-page:last-child { break-after: auto; page-break-after: auto; }",
        ".quotation-header, .quotation-footer { overflow: hidden; }",
        ".quotation-section { margin-bottom: 25px; }",
        f".quotation-section-title {{ color: {primary}; font-weight: 800; margin-bottom: 14px; font-size: 18px; }}",
        ".company-logo { max-width: 180px; max-height: 70px; object-fit: contain; }",
        ".placeholder-logo { border: 1px dashed #ccc; border-radius: 4px; padding: 4px; }",
        ".client-info-row { margin-bottom: 10px; }",
        f".client-info-heading {{ margin: 0 0 14px 0; font-weight: 800; font-size: 16px; color: var(--primary-color, {primary}); }}",
        f".info-label {{ font-weight: 800; color: var(--primary-color, {primary}); display: block; "
        "margin-bottom: 4px; font-size: 14px; }",
        ".info-value { display: block; color: #333; font-size: 14px; font-weight: 500; margin-bottom: 12px; }",
        ".quotation-table { width: 100%; border-collapse: "
        + ("collapse" if table_borders else "separate")
        + "; margin-bottom: 15px; }",
        f".quotation-table th, .quotation-table td {{ padding: 10px; text-align: left; {cell_border} }}",
        f".quotation-table th {{ background-color: {primary}; color: #fff; }}",
        ".quotation-table .num { text-align: right; }",
        f".summary-row-label {{ font-weight: 700; color: {primary}; }}",
        f".quotation-total-row {{ font-weight: 800; border-top: 2px {border_style} {secondary}; }}",
        ".quotation-total-row td { padding-top: 12px; }",
        f".terms-heading {{ font-weight: 700; color: {primary}; margin-bottom: 8px; font-size: 14px; }}",
        ".quotation-note { margin-bottom: 10px; }",
        ".partner-logos { display: flex; flex-wrap: wrap; gap: 24px; justify-content: center; align-items: center; }",
        ".partner-logos img { max-height: 60px; max-width: 150px; object-fit: contain; }",
        ".page-number::after { content: counter(page); }",
        ".total-pages::after { content: counter(pages); }",
    ]
    if alternate_rows:
        rules.append(f".quotation-table tbody tr:nth-child(even) td {{ background-color: {ROW_STRIPE_COLOR}; }}")
    return "\n".join(rules)


def resolve_styles(styles: Optional[TemplateStyles | Dict[str, Any]] = None) -> ComputedStyleSheet:
    """Resolve template styles (model, raw mapping or None) into a computed style sheet."""
    if isinstance(styles, TemplateStyles):
        raw: Dict[str, Any] = styles.model_dump(by_alias=True)
    elif isinstance(styles, dict):
        raw = styles
    else:
        raw = {}

    font_family = resolve_font_family(raw.get("fontFamily", raw.get("font_family")))
    font_px = resolve_font_px(raw.get("fontSize", raw.get("font_size")))
    font_size = f"{font_px}px"
    primary = resolve_color(raw.get("primaryColor", raw.get("primary_color")), DEFAULT_PRIMARY_COLOR)
    secondary = resolve_color(raw.get("secondaryColor", raw.get("secondary_color")), DEFAULT_SECONDARY_COLOR)
    background = resolve_color(raw.get("backgroundColor", raw.get("background_color")), DEFAULT_BACKGROUND_COLOR)
    border_style = _border_style(raw.get("borderStyle", raw.get("border_style", "solid")))
    table_borders = raw.get("tableBorders", raw.get("table_borders", True)) is not False
    alternate_rows = raw.get("alternateRowColors", raw.get("alternate_row_colors", True)) is not False
    custom_css = raw.get("customCSS", raw.get("custom_css", ""))
    if not isinstance(custom_css, str):
        custom_css = ""

    rules = _compile_rules(
        font_family=font_family,
        font_size=font_size,
        primary=primary,
        secondary=secondary,
        background=background,
        border_style=border_style,
        table_borders=table_borders,
        alternate_rows=alternate_rows,
    )

    return ComputedStyleSheet(
        font_family=font_family,
        font_size=font_size,
        font_px=font_px,
        line_height_px=font_px * LINE_HEIGHT,
        primary_color=primary,
        secondary_color=secondary,
        background_color=background,
        border_style=border_style,
        table_borders=table_borders,
        alternate_row_colors=alternate_rows,
        rules=rules,
        custom_css=custom_css,
    )
