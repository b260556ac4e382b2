# quotedoc/core/interpolate.py
"""
Variable interpolator for header/footer/custom-section HTML.

A small scanner splits the text into literal runs and `{{ name }}` tokens;
recognized names are replaced with values from the quotation, everything
else (unknown names, malformed or unterminated braces) is emitted exactly
as written. There is no expression language: a token is a name, nothing more.
"""

from __future__ import annotations

import html
import re
from typing import Any, Dict, List, NamedTuple, Optional, Union

from quotedoc.core.formatting import format_currency, format_date
from quotedoc.schemas.quotation import Quotation, coerce_quotation

OPEN = "{{"
CLOSE = "}}"

_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")

PLACEHOLDER_LOGO = "https://via.placeholder.com/200x100?text=Company+Logo"

PAGE_NUMBER_MARKUP = '<span class="page-number"></span>'
TOTAL_PAGES_MARKUP = '<span class="total-pages"></span>'

# Public token vocabulary. Names are stable; new names may be added.
VOCABULARY = (
    "quotation_number",
    "quotationNumber",
    "quotation_title",
    "title",
    "company_name",
    "organization_name",
    "organizationName",
    "company_email",
    "company_phone",
    "company_address",
    "company_website",
    "company_tagline",
    "company_logo",
    "client_name",
    "contact_name",
    "contactName",
    "client_email",
    "client_phone",
    "creator_name",
    "project_title",
    "lead_title",
    "total",
    "total_amount",
    "totalAmount",
    "subtotal",
    "currency",
    "date",
    "issue_date",
    "issueDate",
    "valid_until",
    "validUntil",
    "status",
    "page_number",
    "total_pages",
)


class Literal(NamedTuple):
    text: str


class Token(NamedTuple):
    name: str
    raw: str


Segment = Union[Literal, Token]


def tokenize(text: str) -> List[Segment]:
    """
    Split text into literal and token segments.

    'Quotation #{{quotationNumber}}' -> [Literal('Quotation #'), Token('quotationNumber', '{{quotationNumber}}')]
    Braces that do not enclose a plain name stay inside literals.
    """
    segments: List[Segment] = []
    if not text:
        return segments

    buf: List[str] = []
    pos = 0
    while pos < len(text):
        start = text.find(OPEN, pos)
        if start < 0:
            buf.append(text[pos:])
            break
        end = text.find(CLOSE, start + len(OPEN))
        if end < 0:
            # unterminated: the rest is literal
            buf.append(text[pos:])
            break
        inner = text[start + len(OPEN):end]
        name = inner.strip()
        if OPEN in inner or not _NAME.match(name):
            # '{{{{x}}' and '{{ not a name }}': keep the first brace pair as text and move on
            buf.append(text[pos:start + len(OPEN)])
            pos = start + len(OPEN)
            continue
        buf.append(text[pos:start])
        if buf:
            literal = "".join(buf)
            if literal:
                segments.append(Literal(literal))
            buf = []
        segments.append(Token(name, text[start:end + len(CLOSE)]))
        pos = end + len(CLOSE)

    literal = "".join(buf)
    if literal:
        segments.append(Literal(literal))
    return segments


def placeholders(text: str) -> Dict[str, List[str]]:
    """Token names found in text, split into recognized and unknown (in order of appearance)."""
    known: List[str] = []
    unknown: List[str] = []
    for seg in tokenize(text):
        if isinstance(seg, Token):
            target = known if seg.name in VOCABULARY else unknown
            if seg.name not in target:
                target.append(seg.name)
    return {"known": known, "unknown": unknown}


def _logo_markup(quotation: Quotation) -> str:
    logo = quotation.company_logo
    alt = html.escape(f"{quotation.company_value('name') or 'Company'} Logo", quote=True)
    if logo:
        return f'<img src="{html.escape(logo, quote=True)}" alt="{alt}" class="company-logo" />'
    return f'<img src="{PLACEHOLDER_LOGO}" alt="{alt}" class="company-logo placeholder-logo" />'


def build_context(quotation: Quotation) -> Dict[str, str]:
    """Token name -> replacement text for one quotation. Data values are HTML-escaped."""
    q = quotation
    currency = q.currency
    esc = html.escape

    company_name = esc(q.company_value("name"))
    client_name = esc(q.contact.full_name)
    total = esc(format_currency(q.computed_total, currency))
    issue_date = esc(format_date(q.issue_date, currency))
    valid_until = esc(format_date(q.valid_until, currency))
    lead_title = esc(q.lead.title)

    context = {
        "quotation_number": esc(q.quotation_number),
        "quotation_title": esc(q.title),
        "title": esc(q.title),
        "company_name": company_name,
        "organization_name": company_name,
        "company_email": esc(q.company_value("email")),
        "company_phone": esc(q.company_value("phone")),
        "company_address": esc(q.company_value("address")),
        "company_website": esc(q.company_value("website")),
        "company_tagline": esc(q.organization.tagline),
        "company_logo": _logo_markup(q),
        "client_name": client_name,
        "contact_name": client_name,
        "client_email": esc(q.contact.email),
        "client_phone": esc(q.contact.phone or q.contact.whatsapp_number),
        "creator_name": esc(q.creator.full_name),
        "project_title": lead_title,
        "lead_title": lead_title,
        "total": total,
        "total_amount": total,
        "subtotal": esc(format_currency(q.computed_subtotal, currency)),
        "currency": esc(currency),
        "date": issue_date,
        "issue_date": issue_date,
        "valid_until": valid_until,
        "status": esc(q.status),
        "page_number": PAGE_NUMBER_MARKUP,
        "total_pages": TOTAL_PAGES_MARKUP,
    }
    # camelCase spellings used by the template editor
    context["quotationNumber"] = context["quotation_number"]
    context["organizationName"] = company_name
    context["contactName"] = client_name
    context["totalAmount"] = total
    context["issueDate"] = issue_date
    context["validUntil"] = valid_until
    return context


def interpolate(
    template_string: Optional[str],
    quotation: Any,
    *,
    context: Optional[Dict[str, str]] = None,
) -> str:
    """
    Substitute placeholder tokens with live quotation values.

    Unknown tokens are left verbatim so that a typo in the editor never
    blocks rendering. `context` may be passed to reuse a prebuilt table.
    """
    if not template_string:
        return ""
    if context is None:
        context = build_context(coerce_quotation(quotation))

    out: List[str] = []
    for seg in tokenize(template_string):
        if isinstance(seg, Token):
            out.append(context.get(seg.name, seg.raw))
        else:
            out.append(seg.text)
    return "".join(out)
