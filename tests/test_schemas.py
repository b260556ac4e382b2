import copy

import pytest

from quotedoc.schemas import (
    Orientation,
    PageSize,
    SectionType,
    Template,
    coerce_quotation,
    coerce_template,
)
from quotedoc.schemas.quotation import Organization, QuotationItem


def test_template_defaults_match_storage_model():
    tpl = Template()
    assert tpl.layout.header.show is True
    assert tpl.layout.header.height == 100
    assert tpl.layout.footer.height == 80
    assert tpl.page_settings.page_size is PageSize.A4
    assert tpl.page_settings.orientation is Orientation.PORTRAIT
    assert tpl.page_settings.margins.top == 40
    assert tpl.styles.primary_color == "#3B82F6"
    assert tpl.styles.font_family == "Inter, sans-serif"
    assert tpl.styles.table_borders is True


def test_camel_case_payload_and_enum_case():
    tpl = coerce_template({
        "isDefault": True,
        "pageSettings": {"pageSize": "letter", "orientation": "LANDSCAPE"},
        "styles": {"customCSS": ".x { color: red; }", "fontSize": 14},
    })
    assert tpl.is_default is True
    assert tpl.page_settings.page_size is PageSize.LETTER
    assert tpl.page_settings.orientation is Orientation.LANDSCAPE
    assert tpl.styles.custom_css == ".x { color: red; }"
    assert tpl.styles.font_size == "14px"


def test_invalid_fields_fall_back_to_defaults():
    tpl = coerce_template({
        "name": "Broken",
        "layout": {"header": {"height": "tall", "content": "Hi"}},
        "pageSettings": {"pageSize": "A5", "margins": {"top": -5, "left": 12}},
    })
    assert tpl.name == "Broken"
    assert tpl.layout.header.height == 100
    assert tpl.layout.header.content == "Hi"
    assert tpl.page_settings.page_size is PageSize.A4
    assert tpl.page_settings.margins.top == 40
    assert tpl.page_settings.margins.left == 12


def test_invalid_section_entries_are_dropped():
    tpl = coerce_template({"layout": {"sections": ["oops", {"id": "a", "type": "terms"}]}})
    assert [s.id for s in tpl.layout.sections] == ["a"]


def test_non_mapping_payload_gives_defaults():
    assert coerce_template("garbage") == Template()
    assert coerce_template(None) == Template()


def test_coercion_never_touches_caller_payload():
    payload = {"layout": {"header": {"height": "tall"}}}
    before = copy.deepcopy(payload)
    coerce_template(payload)
    assert payload == before


def test_id_alias_is_stringified():
    assert coerce_template({"_id": 42}).id == "42"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("items_table", SectionType.ITEMS_TABLE),
        ("Items-Table", SectionType.ITEMS_TABLE),
        ("client info", SectionType.CLIENT_INFO),
        ("summary", SectionType.TOTALS),
        ("additional_logos", SectionType.ADDITIONAL_LOGOS),
        ("banner", SectionType.UNKNOWN),
        (None, SectionType.UNKNOWN),
    ],
)
def test_section_type_normalization(raw, expected):
    assert SectionType.from_raw(raw) is expected


def test_item_total_prefers_stored_value():
    assert QuotationItem(quantity=2, unit_price=100, total=5).line_total == 5


def test_item_total_from_discount_and_tax():
    item = QuotationItem(quantity=2, unit_price=100, discount=10, tax=5)
    assert item.line_total == pytest.approx(189.0)


def test_bare_reference_ids_become_empty_records():
    q = coerce_quotation({"organization": "64f0c2a1", "contact": None})
    assert q.organization == Organization()
    assert q.contact.full_name == ""


def test_currency_is_normalized():
    assert coerce_quotation({"currency": "eur"}).currency == "EUR"
    assert coerce_quotation({"currency": ""}).currency == "USD"


def test_computed_totals_without_stored_values():
    q = coerce_quotation({
        "items": [{"quantity": 2, "unitPrice": 50}, {"quantity": 1, "unitPrice": 100}],
        "discount": {"type": "fixed", "value": 20, "amount": 20},
        "tax": {"percentage": 10, "amount": 18},
        "shipping": 5,
    })
    assert q.computed_subtotal == pytest.approx(200)
    assert q.computed_total == pytest.approx(203)


def test_company_details_override_organization(quotation_payload):
    payload = dict(quotation_payload, companyDetails={"name": "Acme Europe GmbH"})
    q = coerce_quotation(payload)
    assert q.company_value("name") == "Acme Europe GmbH"
    assert q.company_value("email") == "sales@acme.example"


def test_non_finite_numbers_fall_back_to_defaults():
    tpl = coerce_template({
        "layout": {"header": {"height": float("inf")}},
        "pageSettings": {"margins": {"top": float("nan"), "left": 15}},
    })
    assert tpl.layout.header.height == 100
    assert tpl.page_settings.margins.top == 40
    assert tpl.page_settings.margins.left == 15
    q = coerce_quotation({"total": float("inf"), "items": [{"unitPrice": float("-inf")}]})
    assert q.total is None
    assert q.items[0].unit_price == 0
