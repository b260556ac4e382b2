import pytest

from quotedoc.core.compose import compose, paginate, template_fingerprint
from quotedoc.core.geometry import PX_PER_MM, mm_to_px, page_geometry
from quotedoc.core.sections import SectionOutput
from quotedoc.schemas import PageSettings, Region, SectionType, coerce_template


def _out(id_, height):
    return SectionOutput(id=id_, type=SectionType.CUSTOM, raw_type="custom", title="", html="", height=height)


def _ids(pages):
    return [[s.id for s in page] for page in pages]


def _pinned(template_payload, heights):
    template_payload["layout"]["sections"] = [
        {"id": f"s{i}", "type": "custom", "content": "x", "order": i, "styles": {"height": h}}
        for i, h in enumerate(heights, start=1)
    ]
    return template_payload


# ---------- paginate ----------

def test_break_before_overflow():
    pages = paginate([_out("s1", 400), _out("s2", 400), _out("s3", 400)], 1000)
    assert _ids(pages) == [["s1", "s2"], ["s3"]]


def test_exact_fit_stays_on_page():
    assert _ids(paginate([_out("a", 500), _out("b", 500)], 1000)) == [["a", "b"]]


def test_oversized_section_gets_its_own_page():
    pages = paginate([_out("a", 300), _out("big", 1500), _out("c", 300)], 1000)
    assert _ids(pages) == [["a"], ["big"], ["c"]]


def test_zero_height_never_breaks():
    assert _ids(paginate([_out("a", 1000), _out("empty", 0)], 1000)) == [["a", "empty"]]


def test_no_sections_still_one_page():
    assert paginate([], 1000) == [[]]


def test_top_offsets_include_header():
    [page] = paginate([_out("a", 400), _out("b", 400)], 1000, top_offset=100)
    assert [s.top for s in page] == [100, 500]


# ---------- geometry ----------

def test_a4_portrait_geometry():
    g = page_geometry(PageSettings(), header=Region(height=100), footer=Region(height=80))
    assert g.width_px == mm_to_px(210)
    assert g.content_height_px == mm_to_px(297 - 80)
    assert g.body_height_px == pytest.approx(g.content_height_px - 180)
    assert g.css_page_size == "210mm 297mm"


def test_landscape_swaps_axes():
    settings = PageSettings.model_validate({"pageSize": "Letter", "orientation": "landscape"})
    g = page_geometry(settings)
    assert (g.width_mm, g.height_mm) == (279.4, 215.9)


def test_hidden_regions_reserve_nothing():
    g = page_geometry(PageSettings(), header=Region(show=False, height=300), footer=None)
    assert g.header_height_px == 0
    assert g.body_height_px == g.content_height_px


def test_impossible_margins_collapse():
    settings = PageSettings.model_validate({"margins": {"top": 200, "bottom": 200, "left": 10, "right": 10}})
    g = page_geometry(settings)
    assert g.margins_mm == (0.0, 10.0, 0.0, 10.0)
    assert g.content_height_px == pytest.approx(297 * PX_PER_MM, abs=0.01)


# ---------- compose ----------

def test_compose_is_deterministic(template_payload, quotation_payload):
    first = compose(template_payload, quotation_payload)
    second = compose(template_payload, quotation_payload)
    assert first.model_dump() == second.model_dump()


def test_header_end_to_end(template_payload, quotation_payload):
    doc = compose(template_payload, quotation_payload)
    assert doc.pages[0].header.html == "Quotation #QUO-202308-0001"
    assert doc.title == "Quotation QUO-202308-0001"
    assert doc.geometry.margins_mm == (10, 10, 10, 10)


def test_pagination_through_compose(template_payload, quotation):
    doc = compose(_pinned(template_payload, [400, 400, 400]), quotation)
    assert doc.page_count == 2
    assert [[s.id for s in p.body] for p in doc.pages] == [["s1", "s2"], ["s3"]]
    assert [p.number for p in doc.pages] == [1, 2]
    assert doc.pages[1].body[0].top == 100


def test_header_and_footer_repeat_identically(template_payload, quotation):
    doc = compose(_pinned(template_payload, [600, 600, 600]), quotation)
    assert doc.page_count == 3
    assert len({p.header.html for p in doc.pages}) == 1
    assert len({p.footer.html for p in doc.pages}) == 1
    assert 'class="page-number"' in doc.pages[0].footer.html


def test_hidden_header_is_omitted(template_payload, quotation):
    template_payload["layout"]["header"]["show"] = False
    doc = compose(template_payload, quotation)
    assert all(p.header is None for p in doc.pages)
    assert doc.geometry.header_height_px == 0


def test_hidden_sections_absent_from_every_page(template_payload, quotation):
    template_payload["layout"]["sections"][1]["isVisible"] = False
    doc = compose(template_payload, quotation)
    assert "items" not in doc.section_ids()
    assert doc.section_ids() == ["client", "summary", "terms"]


@pytest.mark.parametrize(
    "template",
    [
        None,
        "not a template",
        {"layout": "nope", "styles": 5},
        {"layout": {"sections": [{"type": 7, "order": "first"}, None]}, "pageSettings": {"margins": "wide"}},
        {"styles": {"fontSize": [], "borderStyle": "wavy"}, "layout": {"header": {"content": 12}}},
    ],
)
def test_malformed_templates_still_render(template, quotation):
    doc = compose(template, quotation)
    assert doc.page_count >= 1
    assert doc.stylesheet.font_family == "Inter, sans-serif"


def test_accepts_models(template_payload, quotation):
    tpl = coerce_template(template_payload)
    assert compose(tpl, quotation).model_dump() == compose(template_payload, quotation).model_dump()


def test_fingerprint_tracks_template_changes(template_payload):
    before = template_fingerprint(coerce_template(template_payload))
    assert before == template_fingerprint(coerce_template(template_payload))
    template_payload["styles"]["primaryColor"] = "#000000"
    assert template_fingerprint(coerce_template(template_payload)) != before


@pytest.mark.parametrize(
    "overrides",
    [
        {"total": 1e30},
        {"subtotal": 1e27, "total": None},
        {"items": [{"name": "Huge", "quantity": 1, "unitPrice": 1e27}]},
    ],
)
def test_very_large_amounts_still_render(template_payload, quotation_payload, overrides):
    template_payload["layout"]["header"]["content"] = "{{total}}"
    doc = compose(template_payload, dict(quotation_payload, **overrides))
    assert doc.page_count >= 1
    assert doc.pages[0].header.html.startswith("$")
