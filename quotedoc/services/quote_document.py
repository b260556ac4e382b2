from __future__ import annotations

import html
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from quotedoc import __version__
from quotedoc.core.compose import compose
from quotedoc.core.document import Document, Page, PageRegion
from quotedoc.core.sections import LayoutMetrics

# Packaged HTML shell
TEMPLATE_PATH = Path(__file__).resolve().parents[1] / "templates" / "quotation_document.html"

_MARKER = re.compile(r"\[\[([a-zA-Z0-9_]+)\]\]")


def _region_html(region: PageRegion | None, tag: str, css_class: str) -> str:
    if region is None:
        return ""
    return f'<{tag} class="{css_class}">{region.html}</{tag}>'


def build_page_html(page: Page) -> str:
    """
    One printed page:

      <section class="quotation-page" data-page="N">
        <header class="quotation-header">...</header>
        <main class="quotation-body"> sections </main>
        <footer class="quotation-footer">...</footer>
      </section>
    """
    blocks: List[str] = []
    for section in page.body:
        if not section.html:
            continue
        blocks.append(
            f'<div class="quotation-block" data-section-id="{html.escape(section.id, quote=True)}" '
            f'data-section-type="{section.type.value}" style="{html.escape(section.style, quote=True)}">{section.html}</div>'
        )
    return (
        f'<section class="quotation-page" data-page="{page.number}">'
        + _region_html(page.header, "header", "quotation-header")
        + '<main class="quotation-body">'
        + "\n".join(blocks)
        + "</main>"
        + _region_html(page.footer, "footer", "quotation-footer")
        + "</section>"
    )


def build_context_from_document(document: Document, *, lang: str = "en") -> Dict[str, str]:
    """
    Values for every [[key]] in the shell. Geometry comes from the composed
    document so the printed page matches what pagination assumed.
    """
    g = document.geometry
    return {
        "lang": lang,
        "version": __version__,
        "document_title": html.escape(document.title),
        "template_fingerprint": document.template_fingerprint,
        "page_size": g.css_page_size,
        "page_margins": g.css_margins,
        "content_width": f"{g.content_width_px:g}",
        "content_height": f"{g.content_height_px:g}",
        "header_height": f"{g.header_height_px:g}",
        "footer_height": f"{g.footer_height_px:g}",
        "stylesheet": document.stylesheet.css,
        "pages_html": "\n".join(build_page_html(page) for page in document.pages),
    }


def render_shell(context: Dict[str, Any]) -> str:
    """
    Read the HTML shell and replace every [[key]] with its context value.
    Markers without a value are removed so no tags leak into HTML/PDF.
    """
    shell = TEMPLATE_PATH.read_text(encoding="utf-8")
    # single pass, so markers inside substituted content are left alone
    return _MARKER.sub(lambda m: str(context.get(m.group(1), "")), shell)


def render_document_html(document: Document) -> str:
    """Standalone HTML for a composed document, one page per <section>."""
    return render_shell(build_context_from_document(document))


def render_quotation_html(template: Any, quotation: Any, *, metrics: Optional[LayoutMetrics] = None) -> str:
    """Compose and export in one step."""
    return render_document_html(compose(template, quotation, metrics=metrics))
