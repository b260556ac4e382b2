# quotedoc/core/compose.py
"""
Page composer: template + quotation -> paginated Document.

    1) resolve styles
    2) header (interpolated) when layout.header.show
    3) lay out visible sections in order
    4) footer (interpolated) when layout.footer.show
    5) greedy pagination: a section that would overflow the body height
       starts a new page; header/footer repeat unchanged on every page
    6) Document

One-shot and pure. Malformed input never raises: the payloads are coerced
with defaults so the live preview always has something to show.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, List, Optional, Sequence

from quotedoc.core.document import Document, Page, PageRegion
from quotedoc.core.geometry import page_geometry
from quotedoc.core.interpolate import build_context, interpolate
from quotedoc.core.sections import LayoutMetrics, SectionOutput, layout_sections
from quotedoc.core.styles import resolve_styles
from quotedoc.schemas.quotation import coerce_quotation
from quotedoc.schemas.template import Region, Template, coerce_template

logger = logging.getLogger(__name__)


def template_fingerprint(template: Template) -> str:
    """Stable short hash of a template, for callers that snapshot what a quotation was rendered with."""
    payload = json.dumps(template.model_dump(by_alias=True, mode="json"), sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


def paginate(
    sections: Sequence[SectionOutput],
    body_height: float,
    *,
    top_offset: float = 0.0,
) -> List[List[SectionOutput]]:
    """
    Greedy fill, break before overflow.

    heights [400, 400, 400] with body height 1000 -> [[s1, s2], [s3]].
    A section taller than a whole page gets a page of its own. Always
    returns at least one (possibly empty) page. `top` of each placed
    section is its y offset in the page content area.
    """
    pages: List[List[SectionOutput]] = [[]]
    used = 0.0
    for section in sections:
        if pages[-1] and section.height > 0 and used + section.height > body_height:
            pages.append([])
            used = 0.0
        pages[-1].append(section.model_copy(update={"top": round(top_offset + used, 2)}))
        used += section.height
    return pages


def _region(region: Region, quotation, tokens) -> Optional[PageRegion]:
    if not region.show:
        return None
    return PageRegion(html=interpolate(region.content, quotation, context=tokens), height=float(region.height))


def compose(template: Any, quotation: Any, *, metrics: Optional[LayoutMetrics] = None) -> Document:
    """Render a template (model or raw payload) against a quotation (model or raw payload)."""
    tpl = coerce_template(template)
    q = coerce_quotation(quotation)
    layout = tpl.layout

    sheet = resolve_styles(tpl.styles)
    tokens = build_context(q)
    geometry = page_geometry(tpl.page_settings, header=layout.header, footer=layout.footer)

    header = _region(layout.header, q, tokens)
    outputs = layout_sections(
        layout.sections,
        q,
        sheet,
        tpl.page_settings,
        geometry=geometry,
        metrics=metrics,
        tokens=tokens,
    )
    footer = _region(layout.footer, q, tokens)

    grouped = paginate(outputs, geometry.body_height_px, top_offset=geometry.header_height_px)
    pages = [
        Page(number=idx, header=header, body=body, footer=footer)
        for idx, body in enumerate(grouped, start=1)
    ]
    logger.debug(
        "Composed %s: %d sections on %d pages (body height %.1fpx)",
        q.quotation_number or "quotation",
        len(outputs),
        len(pages),
        geometry.body_height_px,
    )

    title = f"Quotation {q.quotation_number}".strip()
    return Document(
        title=title,
        pages=pages,
        stylesheet=sheet,
        geometry=geometry,
        template_fingerprint=template_fingerprint(tpl),
    )
