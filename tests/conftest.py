# tests/conftest.py
import os, sys

import pytest

# project root (the directory holding "quotedoc") first on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from quotedoc.schemas import coerce_quotation  # noqa: E402
from quotedoc.services import template_library  # noqa: E402


@pytest.fixture
def template_payload():
    """The template editor's sample: A4 portrait, 10mm margins."""
    return {
        "_id": "tpl-1",
        "name": "Editor sample",
        "layout": {
            "header": {"show": True, "height": 100, "content": "Quotation #{{quotationNumber}}"},
            "footer": {"show": True, "height": 80, "content": "Page {{page_number}} of {{total_pages}}"},
            "sections": [
                {"id": "client", "type": "client_info", "title": "Client Information", "order": 1, "isVisible": True},
                {"id": "items", "type": "items_table", "title": "Items", "order": 2, "isVisible": True},
                {"id": "summary", "type": "summary", "title": "Summary", "order": 3, "isVisible": True},
                {"id": "terms", "type": "terms", "title": "Terms", "order": 4, "isVisible": True},
            ],
        },
        "styles": {
            "primaryColor": "#3B82F6",
            "secondaryColor": "#1E40AF",
            "fontFamily": "Inter, sans-serif",
            "fontSize": "12px",
            "borderStyle": "solid",
            "tableBorders": True,
            "alternateRowColors": True,
            "customCSS": "",
        },
        "pageSettings": {
            "pageSize": "A4",
            "orientation": "portrait",
            "margins": {"top": 10, "right": 10, "bottom": 10, "left": 10},
        },
    }


@pytest.fixture
def quotation_payload():
    return {
        "quotationNumber": "QUO-202308-0001",
        "title": "Website Redesign",
        "organization": {
            "companyName": "Acme Corporation",
            "email": "sales@acme.example",
            "phone": "+1 555 0100",
            "address": "1 Market Street",
        },
        "contact": {"firstName": "Jane", "lastName": "Smith", "email": "jane@example.com", "whatsappNumber": "+1234567890"},
        "creator": {"firstName": "John", "lastName": "Doe"},
        "lead": {"title": "Website Redesign Project", "leadId": "LEAD-0001"},
        "items": [
            {"name": "Website Design", "description": "Complete redesign", "quantity": 1, "unitPrice": 2500,
             "discount": 10, "tax": 5, "total": 2362.5},
            {"name": "SEO Optimization", "description": "SEO package", "quantity": 1, "unitPrice": 800,
             "discount": 0, "tax": 5, "total": 840},
        ],
        "subtotal": 3300,
        "discount": {"type": "percentage", "value": 10, "amount": 330},
        "tax": {"name": "GST", "percentage": 5, "amount": 148.5},
        "total": 3118.5,
        "currency": "USD",
        "issueDate": "2023-08-15T00:00:00.000Z",
        "validUntil": "2023-09-14T00:00:00.000Z",
        "status": "draft",
        "terms": [
            {"title": "Payment Terms", "content": "Payment due within 30 days of invoice date."},
        ],
    }


@pytest.fixture
def quotation(quotation_payload):
    return coerce_quotation(quotation_payload)


@pytest.fixture(autouse=True)
def _fresh_catalog_cache():
    template_library.clear_cache()
    yield
    template_library.clear_cache()
