# quotedoc/schemas/template.py
"""
Template definition as stored by the template API.

All fields default to the values of the template storage model, so a partial
or half-edited template still validates. Use `coerce_template()` for payloads
that may contain invalid values.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from quotedoc.schemas.base import CamelModel, coerce_model


class PageSize(str, Enum):
    A4 = "A4"
    LETTER = "Letter"
    LEGAL = "Legal"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class BorderStyle(str, Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"
    DOUBLE = "double"


class SectionType(str, Enum):
    CLIENT_INFO = "client_info"
    ITEMS_TABLE = "items_table"
    TOTALS = "totals"
    TERMS = "terms"
    NOTES = "notes"
    CUSTOM = "custom"
    ADDITIONAL_LOGOS = "additional_logos"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, raw: Any) -> "SectionType":
        """'items-table', 'Items Table' and 'items_table' are the same type; 'summary' means totals."""
        key = re.sub(r"[\s\-]+", "_", str(raw or "").strip().lower())
        key = _SECTION_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.UNKNOWN


_SECTION_ALIASES = {
    "summary": "totals",
    "total": "totals",
    "client": "client_info",
    "items": "items_table",
    "logos": "additional_logos",
    "terms_and_conditions": "terms",
}


def _match_enum(enum_cls, value: Any) -> Any:
    if isinstance(value, str):
        for member in enum_cls:
            if member.value.lower() == value.strip().lower():
                return member
    return value


class Margins(CamelModel):
    """Page margins in millimeters."""

    top: float = Field(40, ge=0)
    right: float = Field(40, ge=0)
    bottom: float = Field(40, ge=0)
    left: float = Field(40, ge=0)


class PageSettings(CamelModel):
    page_size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    margins: Margins = Field(default_factory=Margins)

    @field_validator("page_size", mode="before")
    @classmethod
    def _page_size(cls, v):
        return _match_enum(PageSize, v)

    @field_validator("orientation", mode="before")
    @classmethod
    def _orientation(cls, v):
        return _match_enum(Orientation, v)


class Region(CamelModel):
    """Header or footer chrome: fixed height (px) and HTML content with placeholders."""

    show: bool = True
    height: float = Field(100, ge=0)
    content: str = ""


class Section(CamelModel):
    id: str = ""
    type: str = ""
    title: str = ""
    content: str = ""
    order: float = 0
    is_visible: bool = True
    styles: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "type", "title", mode="before")
    @classmethod
    def _scalar_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def kind(self) -> SectionType:
        return SectionType.from_raw(self.type)


def _default_footer() -> Region:
    return Region(height=80)


class Layout(CamelModel):
    header: Region = Field(default_factory=Region)
    footer: Region = Field(default_factory=_default_footer)
    sections: List[Section] = Field(default_factory=list)


class TemplateStyles(CamelModel):
    primary_color: str = "#3B82F6"
    secondary_color: str = "#1E40AF"
    background_color: str = "#ffffff"
    font_family: str = "Inter, sans-serif"
    font_size: str = "12px"
    border_style: BorderStyle = BorderStyle.SOLID
    table_borders: bool = True
    alternate_row_colors: bool = True
    custom_css: str = Field("", alias="customCSS")

    @field_validator("font_size", mode="before")
    @classmethod
    def _font_size(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return f"{v:g}px"
        return v

    @field_validator("border_style", mode="before")
    @classmethod
    def _border_style(cls, v):
        return _match_enum(BorderStyle, v)


class Template(CamelModel):
    id: Optional[str] = Field(None, alias="_id")
    name: str = ""
    description: str = ""
    is_default: bool = False
    preview_image: str = ""
    layout: Layout = Field(default_factory=Layout)
    styles: TemplateStyles = Field(default_factory=TemplateStyles)
    page_settings: PageSettings = Field(default_factory=PageSettings)

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        if v is None:
            return None
        return str(v)


def coerce_template(payload: Any) -> Template:
    """Template from any payload; invalid fields fall back to defaults."""
    return coerce_model(Template, payload)
