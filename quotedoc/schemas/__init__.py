from quotedoc.schemas.quotation import Quotation, QuotationItem, coerce_quotation
from quotedoc.schemas.template import (
    BorderStyle,
    Layout,
    Margins,
    Orientation,
    PageSettings,
    PageSize,
    Region,
    Section,
    SectionType,
    Template,
    TemplateStyles,
    coerce_template,
)

__all__ = [
    "BorderStyle",
    "Layout",
    "Margins",
    "Orientation",
    "PageSettings",
    "PageSize",
    "Quotation",
    "QuotationItem",
    "Region",
    "Section",
    "SectionType",
    "Template",
    "TemplateStyles",
    "coerce_quotation",
    "coerce_template",
]
