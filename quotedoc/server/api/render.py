import logging
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse

from quotedoc.core.compose import compose
from quotedoc.core.document import Document
from quotedoc.schemas.template import Template
from quotedoc.server.schemas.render import BuiltinTemplateOut, RenderIn
from quotedoc.server.settings.config import settings
from quotedoc.services.quote_document import render_document_html
from quotedoc.services.template_library import (
    default_template,
    get_builtin_template,
    list_builtin_templates,
    sample_quotation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotations", tags=["quotations"])


# ==============================
# HELPERS
# ==============================

def _builtin_or_404(key: str) -> Template:
    tpl = get_builtin_template(key, settings.templates_path or None)
    if tpl is None:
        raise HTTPException(status_code=404, detail=f"Unknown built-in template '{key}'")
    return tpl


def _compose_request(body: RenderIn) -> Document:
    if body.template is not None:
        template = body.template
    elif body.template_key:
        template = _builtin_or_404(body.template_key)
    else:
        template = default_template(settings.templates_path or None)
    quotation = body.quotation if body.quotation is not None else sample_quotation()

    document = compose(template, quotation, metrics=settings.layout_metrics())
    logger.info(
        "Rendered %s (%d pages, template %s)",
        document.title or "quotation",
        document.page_count,
        document.template_fingerprint,
    )
    return document


# ==============================
# BUILT-IN TEMPLATES
# ==============================

@router.get("/templates/builtin", response_model=List[BuiltinTemplateOut], response_model_by_alias=True)
def list_templates():
    return list_builtin_templates(settings.templates_path or None)


@router.get("/templates/builtin/{key}")
def get_template(key: str):
    return _builtin_or_404(key).model_dump(by_alias=True, mode="json")


@router.get(
    "/templates/builtin/{key}/preview",
    response_class=HTMLResponse,
    summary="Preview a built-in template against the sample quotation",
)
def preview_template(key: str):
    document = compose(_builtin_or_404(key), sample_quotation(), metrics=settings.layout_metrics())
    return HTMLResponse(content=render_document_html(document))


# ==============================
# RENDER
# ==============================

@router.post("/render", response_class=HTMLResponse, summary="Render a quotation document (HTML)")
def render_html(body: RenderIn):
    return HTMLResponse(content=render_document_html(_compose_request(body)))


@router.post("/render/document", summary="Render a quotation document (paginated JSON)")
def render_document(body: RenderIn):
    return _compose_request(body).model_dump(mode="json")
