# quotedoc/schemas/quotation.py
from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from quotedoc.schemas.base import CamelModel, coerce_model


def _iso_or_value(v: Any) -> Any:
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    return v


def _record_or_empty(v: Any) -> Any:
    # references that were never populated arrive as bare id strings
    if v is None or not isinstance(v, Mapping):
        return {}
    return v


def _full_name(first: str, last: str) -> str:
    return f"{first or ''} {last or ''}".strip()


class QuotationItem(CamelModel):
    name: str = ""
    description: str = ""
    quantity: float = 1
    unit_price: float = 0
    discount: float = 0
    tax: float = 0
    total: Optional[float] = None

    @property
    def line_total(self) -> float:
        """Stored total, else quantity * unit price less discount % plus tax %."""
        if self.total is not None:
            return self.total
        base = self.quantity * self.unit_price
        return base * (1 - self.discount / 100) * (1 + self.tax / 100)


class Discount(CamelModel):
    type: str = "percentage"
    value: float = 0
    amount: float = 0


class Tax(CamelModel):
    name: str = "Tax"
    percentage: float = 0
    amount: float = 0


class Term(CamelModel):
    title: str = ""
    content: str = ""


class Note(CamelModel):
    content: str = ""
    created_by: Any = None
    timestamp: Optional[str] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp(cls, v):
        return _iso_or_value(v)


class Organization(CamelModel):
    company_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    tagline: str = ""
    website: str = ""
    logo: Optional[str] = None
    additional_logos: List[str] = Field(default_factory=list)


class Person(CamelModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    whatsapp_number: str = ""

    @property
    def full_name(self) -> str:
        return _full_name(self.first_name, self.last_name)


class Lead(CamelModel):
    title: str = ""
    lead_id: str = ""


class Logos(CamelModel):
    company: Optional[str] = None
    additional: List[str] = Field(default_factory=list)


class CompanyDetails(CamelModel):
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    tax_id: str = ""
    registration_number: str = ""


class Quotation(CamelModel):
    """Quotation record as supplied by the quotation API. Read-only input to rendering."""

    quotation_number: str = ""
    title: str = ""
    items: List[QuotationItem] = Field(default_factory=list)
    subtotal: Optional[float] = None
    discount: Optional[Discount] = None
    tax: Optional[Tax] = None
    shipping: Optional[float] = None
    total: Optional[float] = None
    currency: str = "USD"
    issue_date: Optional[str] = None
    valid_until: Optional[str] = None
    status: str = "draft"
    terms: List[Term] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)
    organization: Organization = Field(default_factory=Organization)
    contact: Person = Field(default_factory=Person)
    creator: Person = Field(default_factory=Person)
    lead: Lead = Field(default_factory=Lead)
    logos: Logos = Field(default_factory=Logos)
    company_details: CompanyDetails = Field(default_factory=CompanyDetails)

    @field_validator("quotation_number", "title", "status", mode="before")
    @classmethod
    def _scalar_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("issue_date", "valid_until", mode="before")
    @classmethod
    def _dates(cls, v):
        return _iso_or_value(v)

    @field_validator("organization", "contact", "creator", "lead", mode="before")
    @classmethod
    def _references(cls, v):
        return _record_or_empty(v)

    @field_validator("currency", mode="before")
    @classmethod
    def _currency(cls, v):
        if isinstance(v, str) and v.strip():
            return v.strip().upper()
        return "USD"

    @property
    def computed_subtotal(self) -> float:
        if self.subtotal is not None:
            return self.subtotal
        return sum(item.line_total for item in self.items)

    @property
    def computed_total(self) -> float:
        if self.total is not None:
            return self.total
        total = self.computed_subtotal
        if self.discount is not None:
            total -= self.discount.amount
        if self.tax is not None:
            total += self.tax.amount
        if self.shipping is not None:
            total += self.shipping
        return total

    def company_value(self, field: str) -> str:
        """Company detail with fallback to the organization record (name, email, phone, address, website)."""
        own = getattr(self.company_details, field, "") or ""
        if own:
            return own
        org_field = "company_name" if field == "name" else field
        return getattr(self.organization, org_field, "") or ""

    @property
    def company_logo(self) -> Optional[str]:
        return self.logos.company or self.organization.logo or None

    @property
    def additional_logos(self) -> List[str]:
        return list(self.logos.additional or self.organization.additional_logos)


def coerce_quotation(payload: Any) -> Quotation:
    """Quotation from any payload; invalid fields fall back to defaults."""
    return coerce_model(Quotation, payload)
