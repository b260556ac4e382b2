from quotedoc.core.compose import compose
from quotedoc.services.quote_document import (
    build_page_html,
    render_document_html,
    render_quotation_html,
    render_shell,
)
from quotedoc.services.template_library import default_template, sample_quotation


def test_standalone_html_document(template_payload, quotation):
    doc = compose(template_payload, quotation)
    html = render_document_html(doc)
    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Quotation QUO-202308-0001</title>" in html
    assert "size: 210mm 297mm;" in html
    assert "margin: 10mm 10mm 10mm 10mm;" in html
    assert html.count('<section class="quotation-page"') == doc.page_count
    assert doc.stylesheet.css in html
    assert f'content="{doc.template_fingerprint}"' in html
    assert "[[" not in html


def test_page_markup_carries_chrome_and_sections(template_payload, quotation):
    page = compose(template_payload, quotation).pages[0]
    out = build_page_html(page)
    assert out.startswith('<section class="quotation-page" data-page="1">')
    assert '<header class="quotation-header">Quotation #QUO-202308-0001</header>' in out
    assert 'data-section-id="client"' in out
    assert out.endswith("</footer></section>")


def test_markers_inside_content_are_not_substituted(template_payload, quotation):
    template_payload["layout"]["sections"].append(
        {"id": "raw", "type": "custom", "content": "Literal [[document_title]] text", "order": 9}
    )
    html = render_quotation_html(template_payload, quotation)
    assert "Literal [[document_title]] text" in html


def test_unfilled_markers_are_removed():
    assert "[[" not in render_shell({})


def test_render_is_deterministic():
    first = render_quotation_html(default_template(), sample_quotation())
    assert first == render_quotation_html(default_template(), sample_quotation())
    assert "QUO-202308-0001" in first
