# quotedoc/core/geometry.py
"""
Page geometry: paper sizes, margins and the content area available to sections.

Paper and margins are specified in millimeters; layout works in CSS pixels
(96 per inch).
"""

from __future__ import annotations

from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict

from quotedoc.schemas.template import Orientation, PageSettings, PageSize, Region

PX_PER_MM = 96 / 25.4

DEFAULT_MARGIN_MM = 40

# width x height, portrait, millimeters
PAPER_SIZES_MM: Dict[PageSize, Tuple[float, float]] = {
    PageSize.A4: (210.0, 297.0),
    PageSize.LETTER: (215.9, 279.4),
    PageSize.LEGAL: (215.9, 355.6),
}


def mm_to_px(mm: float) -> float:
    return round(mm * PX_PER_MM, 2)


class PageGeometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_size: str
    orientation: str
    width_mm: float
    height_mm: float
    margins_mm: Tuple[float, float, float, float]  # top, right, bottom, left
    width_px: float
    height_px: float
    content_width_px: float
    content_height_px: float
    header_height_px: float
    footer_height_px: float
    body_height_px: float

    @property
    def css_page_size(self) -> str:
        return f"{self.width_mm:g}mm {self.height_mm:g}mm"

    @property
    def css_margins(self) -> str:
        return " ".join(f"{m:g}mm" for m in self.margins_mm)


def _margin(value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return DEFAULT_MARGIN_MM
    if value != value or value < 0:  # NaN or negative
        return DEFAULT_MARGIN_MM
    return value


def page_geometry(
    page_settings: PageSettings,
    header: Region | None = None,
    footer: Region | None = None,
) -> PageGeometry:
    """
    Compute the page box for the given settings.

    The body height is what remains for sections once the shown header and
    footer heights are taken from the content area. Margins that would leave
    no content area at all collapse to zero on that axis.
    """
    width_mm, height_mm = PAPER_SIZES_MM.get(page_settings.page_size, PAPER_SIZES_MM[PageSize.A4])
    if page_settings.orientation == Orientation.LANDSCAPE:
        width_mm, height_mm = height_mm, width_mm

    m = page_settings.margins
    top, right, bottom, left = (_margin(m.top), _margin(m.right), _margin(m.bottom), _margin(m.left))
    if top + bottom >= height_mm - 1 / PX_PER_MM:
        top = bottom = 0.0
    if left + right >= width_mm - 1 / PX_PER_MM:
        left = right = 0.0

    content_width = mm_to_px(width_mm - left - right)
    content_height = mm_to_px(height_mm - top - bottom)
    header_h = float(header.height) if header is not None and header.show else 0.0
    footer_h = float(footer.height) if footer is not None and footer.show else 0.0
    body_height = max(content_height - header_h - footer_h, 0.0)

    return PageGeometry(
        page_size=page_settings.page_size.value,
        orientation=page_settings.orientation.value,
        width_mm=width_mm,
        height_mm=height_mm,
        margins_mm=(top, right, bottom, left),
        width_px=mm_to_px(width_mm),
        height_px=mm_to_px(height_mm),
        content_width_px=content_width,
        content_height_px=content_height,
        header_height_px=header_h,
        footer_height_px=footer_h,
        body_height_px=round(body_height, 2),
    )
