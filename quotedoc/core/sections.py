# quotedoc/core/sections.py
"""
Section layout engine.

    1) drop hidden sections
    2) stable sort by `order` (ties keep template order)
    3) render each section with the strategy for its type
    4) attach the computed style

Heights are estimates from the resolved font metrics and text lengths; they
drive pagination and can be pinned per section with `styles.height`.
"""

from __future__ import annotations

import html
import logging
import math
import re
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from quotedoc.core.formatting import format_currency, format_date, format_number, format_percent
from quotedoc.core.geometry import PageGeometry, page_geometry
from quotedoc.core.interpolate import build_context, interpolate
from quotedoc.core.styles import ComputedStyleSheet
from quotedoc.schemas.quotation import Quotation
from quotedoc.schemas.template import PageSettings, Section, SectionType

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[^>]+>")
_BLOCK_BREAK = re.compile(r"<\s*(?:br|/p|/div|/li|/h[1-6]|/tr)\b[^>]*>", re.I)


class LayoutMetrics(BaseModel):
    """Calibration constants (px) for height estimation."""

    model_config = ConfigDict(frozen=True)

    section_gap: float = 25
    title_height: float = 41  # 18px title * 1.5 + 14px margin
    sub_heading_height: float = 38  # 16px heading * 1.5 + 14px margin
    row_padding: float = 20
    char_width_ratio: float = 0.5
    info_row_height: float = 68  # label + value + row margin
    term_heading_height: float = 29
    term_gap: float = 15
    note_gap: float = 10
    logo_cell_width: float = 174  # 150px logo + 24px gap
    logo_row_height: float = 84
    logo_block_padding: float = 40


class SectionOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: SectionType
    raw_type: str
    title: str
    html: str
    height: float
    top: float = 0.0
    style: str = ""


class RenderContext(NamedTuple):
    section: Section
    quotation: Quotation
    sheet: ComputedStyleSheet
    geometry: PageGeometry
    metrics: LayoutMetrics
    tokens: Dict[str, str]

    def text_lines(self, text: str, width_fraction: float = 1.0, font_px: Optional[float] = None) -> int:
        """Wrapped line count of plain text in a column of the content width."""
        font_px = font_px or self.sheet.font_px
        width = self.geometry.content_width_px * width_fraction
        per_line = max(1, int(width / (font_px * self.metrics.char_width_ratio)))
        lines = 0
        for paragraph in (text or "").split("\n"):
            lines += max(1, math.ceil(len(paragraph.strip()) / per_line))
        return lines

    def row_height(self, lines: int = 1) -> float:
        return lines * self.sheet.line_height_px + self.metrics.row_padding


Rendered = Tuple[str, float]
Renderer = Callable[[RenderContext], Rendered]


def _esc(value) -> str:
    return html.escape("" if value is None else str(value))


def _qty(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return format_number(value, digits=2).rstrip("0").rstrip(".")


def _plain_text(markup: str) -> str:
    text = _BLOCK_BREAK.sub("\n", markup or "")
    return html.unescape(_TAG.sub("", text))


def _title_html(title: str) -> str:
    return f'<h3 class="quotation-section-title">{_esc(title)}</h3>'


# ---------- Renderers per section type ----------

def render_client_info(ctx: RenderContext) -> Rendered:
    q = ctx.quotation
    contact = q.contact
    currency = q.currency

    def row(label: str, value: str) -> str:
        return (
            '<div class="client-info-row">'
            f'<strong class="info-label">{_esc(label)}:</strong>'
            f'<span class="info-value">{_esc(value)}</span>'
            "</div>"
        )

    client_rows = [
        row("Name", contact.full_name),
        row("Email", contact.email),
        row("Phone", contact.phone or contact.whatsapp_number),
    ]
    project_rows = [
        row("Project", q.lead.title or "General Inquiry"),
        row("Quotation #", q.quotation_number),
        row("Date", format_date(q.issue_date, currency)),
        row("Valid until", format_date(q.valid_until, currency) or "N/A"),
    ]
    markup = (
        '<div class="quotation-section client-info">'
        '<div style="display: flex; justify-content: space-between;">'
        '<div style="flex: 1;"><h3 class="client-info-heading">Client Information</h3>'
        + "".join(client_rows)
        + "</div>"
        '<div style="flex: 1;"><h3 class="client-info-heading">Project Details</h3>'
        + "".join(project_rows)
        + "</div></div></div>"
    )
    rows = max(len(client_rows), len(project_rows))
    height = ctx.metrics.sub_heading_height + rows * ctx.metrics.info_row_height + ctx.metrics.section_gap
    return markup, height


def render_items_table(ctx: RenderContext) -> Rendered:
    q = ctx.quotation
    title = ctx.section.title or "Products & Services"
    m = ctx.metrics

    if not q.items:
        markup = (
            '<div class="quotation-section">'
            + _title_html(title)
            + "<p>No items have been added to this quotation.</p></div>"
        )
        return markup, m.title_height + ctx.row_height() + m.section_gap

    show_discount = any(item.discount for item in q.items)
    headers = ["Item", "Description", "Qty", "Unit Price"] + (["Discount"] if show_discount else []) + ["Total"]
    numeric = {"Qty", "Unit Price", "Discount", "Total"}
    head = "".join(
        f'<th class="num">{h}</th>' if h in numeric else f"<th>{h}</th>" for h in headers
    )

    rows: List[str] = []
    height = m.title_height + ctx.row_height()
    running = 0.0
    for item in q.items:
        line_total = item.line_total
        running += line_total
        cells = [
            f"<td>{_esc(item.name)}</td>",
            f"<td>{_esc(item.description)}</td>",
            f'<td class="num">{_qty(item.quantity)}</td>',
            f'<td class="num">{_esc(format_currency(item.unit_price, q.currency))}</td>',
        ]
        if show_discount:
            cells.append(f'<td class="num">{format_percent(item.discount) if item.discount else ""}</td>')
        cells.append(f'<td class="num">{_esc(format_currency(line_total, q.currency))}</td>')
        rows.append("<tr>" + "".join(cells) + "</tr>")

        lines = max(ctx.text_lines(item.name, 0.2), ctx.text_lines(item.description, 0.35))
        height += ctx.row_height(lines)

    span = len(headers) - 1
    foot = (
        '<tr class="quotation-total-row">'
        f'<td colspan="{span}">Items total</td>'
        f'<td class="num">{_esc(format_currency(running, q.currency))}</td>'
        "</tr>"
    )
    height += ctx.row_height() + m.section_gap

    markup = (
        '<div class="quotation-section">'
        + _title_html(title)
        + '<table class="quotation-table">'
        f"<thead><tr>{head}</tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        f"<tfoot>{foot}</tfoot>"
        "</table></div>"
    )
    return markup, height


def render_totals(ctx: RenderContext) -> Rendered:
    q = ctx.quotation
    cur = q.currency
    title = ctx.section.title or "Summary"

    lines: List[Tuple[str, str]] = [("Subtotal:", format_currency(q.computed_subtotal, cur))]
    if q.discount is not None:
        kind = format_percent(q.discount.value) if q.discount.type == "percentage" else "Fixed"
        lines.append((f"Discount ({kind}):", "-" + format_currency(q.discount.amount, cur)))
    if q.tax is not None:
        lines.append((f"{q.tax.name or 'Tax'} ({format_percent(q.tax.percentage)}):", format_currency(q.tax.amount, cur)))
    if q.shipping is not None:
        lines.append(("Shipping:", format_currency(q.shipping, cur)))

    rows = "".join(
        f'<tr><td class="summary-row-label">{_esc(label)}</td>'
        f'<td class="num" style="text-align: right;">{_esc(value)}</td></tr>'
        for label, value in lines
    )
    total_row = (
        '<tr class="quotation-total-row">'
        "<td><strong>Total:</strong></td>"
        f'<td class="num" style="text-align: right;"><strong>{_esc(format_currency(q.computed_total, cur))}</strong></td>'
        "</tr>"
    )
    markup = (
        '<div class="quotation-section quotation-totals">'
        + _title_html(title)
        + '<table style="width: 300px; margin-left: auto; border-collapse: collapse;">'
        + rows
        + total_row
        + "</table></div>"
    )
    height = ctx.metrics.title_height + (len(lines) + 1) * ctx.row_height() + ctx.metrics.section_gap
    return markup, height


def render_terms(ctx: RenderContext) -> Rendered:
    terms = ctx.quotation.terms
    if not terms:
        return "", 0.0
    m = ctx.metrics
    blocks: List[str] = []
    height = m.title_height + m.section_gap
    body_px = 13
    for term in terms:
        blocks.append(
            '<div class="quotation-term">'
            f'<h4 class="terms-heading">{_esc(term.title)}</h4>'
            f'<div style="font-size: {body_px}px; line-height: 1.5;">{_esc(term.content)}</div>'
            "</div>"
        )
        lines = ctx.text_lines(term.content, font_px=body_px)
        height += m.term_heading_height + lines * body_px * 1.5 + m.term_gap
    markup = (
        '<div class="quotation-section">'
        + _title_html(ctx.section.title or "Terms & Conditions")
        + "".join(blocks)
        + "</div>"
    )
    return markup, height


def render_notes(ctx: RenderContext) -> Rendered:
    notes = [note for note in ctx.quotation.notes if note.content.strip()]
    if not notes:
        return "", 0.0
    m = ctx.metrics
    height = m.title_height + m.section_gap
    blocks: List[str] = []
    for note in notes:
        blocks.append(f'<div class="quotation-note">{_esc(note.content)}</div>')
        height += ctx.text_lines(note.content) * ctx.sheet.line_height_px + m.note_gap
    markup = (
        '<div class="quotation-section">'
        + _title_html(ctx.section.title or "Notes")
        + "".join(blocks)
        + "</div>"
    )
    return markup, height


def render_additional_logos(ctx: RenderContext) -> Rendered:
    logos = ctx.quotation.additional_logos
    if not logos:
        return "", 0.0
    m = ctx.metrics
    images = "".join(
        f'<div class="partner-logo"><img src="{html.escape(logo, quote=True)}" alt="Partner Logo" /></div>'
        for logo in logos
    )
    per_row = max(1, int(ctx.geometry.content_width_px // m.logo_cell_width))
    rows = math.ceil(len(logos) / per_row)
    markup = (
        '<div class="quotation-section">'
        + _title_html(ctx.section.title or "Partners & Affiliations")
        + f'<div class="partner-logos" style="padding: 20px 0;">{images}</div>'
        "</div>"
    )
    height = m.title_height + rows * m.logo_row_height + m.logo_block_padding + m.section_gap
    return markup, height


def render_custom(ctx: RenderContext) -> Rendered:
    section = ctx.section
    if not section.content:
        return "", 0.0
    body = interpolate(section.content, ctx.quotation, context=ctx.tokens)
    m = ctx.metrics
    height = ctx.text_lines(_plain_text(body)) * ctx.sheet.line_height_px + m.section_gap
    title = ""
    if section.title:
        title = _title_html(section.title)
        height += m.title_height
    markup = f'<div class="quotation-section quotation-custom">{title}<div>{body}</div></div>'
    return markup, height


def render_unknown(ctx: RenderContext) -> Rendered:
    logger.debug("Section %r has unknown type %r, rendering placeholder", ctx.section.id, ctx.section.type)
    raw = html.escape(ctx.section.type, quote=True)
    return f'<div class="quotation-section quotation-unknown" data-section-type="{raw}"></div>', 0.0


SECTION_RENDERERS: Dict[SectionType, Renderer] = {
    SectionType.CLIENT_INFO: render_client_info,
    SectionType.ITEMS_TABLE: render_items_table,
    SectionType.TOTALS: render_totals,
    SectionType.TERMS: render_terms,
    SectionType.NOTES: render_notes,
    SectionType.CUSTOM: render_custom,
    SectionType.ADDITIONAL_LOGOS: render_additional_logos,
    SectionType.UNKNOWN: render_unknown,
}


# ---------- Layout ----------

def _style_number(styles: Dict, *keys: str) -> Optional[float]:
    for key in keys:
        value = styles.get(key)
        if value is None or isinstance(value, bool):
            continue
        text = str(value).strip().lower()
        if text.endswith("px"):
            text = text[:-2]
        try:
            number = float(text)
        except ValueError:
            continue
        if number >= 0 and math.isfinite(number):
            return number
    return None


def order_sections(sections: Iterable[Section]) -> List[Section]:
    """Visible sections, stable-sorted by `order`."""
    visible = [s for s in sections if s.is_visible]
    return sorted(visible, key=lambda s: s.order)


def layout_sections(
    sections: Sequence[Section],
    quotation: Quotation,
    computed_styles: ComputedStyleSheet,
    page_settings: PageSettings,
    *,
    geometry: Optional[PageGeometry] = None,
    metrics: Optional[LayoutMetrics] = None,
    tokens: Optional[Dict[str, str]] = None,
) -> List[SectionOutput]:
    """Filter, order and render template sections. `top` is left at 0 for the composer to fill."""
    geometry = geometry or page_geometry(page_settings)
    metrics = metrics or LayoutMetrics()
    tokens = tokens if tokens is not None else build_context(quotation)
    style = computed_styles.section_style()

    # ids are positional in the template so they stay stable across re-renders
    positions = {id(s): idx for idx, s in enumerate(sections)}

    outputs: List[SectionOutput] = []
    for section in order_sections(sections):
        kind = section.kind
        ctx = RenderContext(section, quotation, computed_styles, geometry, metrics, tokens)
        markup, height = SECTION_RENDERERS[kind](ctx)

        pinned = _style_number(section.styles, "height")
        if pinned is not None:
            height = pinned
        floor = _style_number(section.styles, "minHeight", "min_height")
        if floor is not None:
            height = max(height, floor)

        outputs.append(
            SectionOutput(
                id=section.id or f"section_{positions[id(section)]}",
                type=kind,
                raw_type=section.type,
                title=section.title,
                html=markup,
                height=round(height, 2),
                style=style,
            )
        )
    return outputs
