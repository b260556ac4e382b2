# quotedoc/server/schemas/render.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RenderIn(BaseModel):
    """
    Payload for /quotations/render and /quotations/render/document.

    Either an inline template (the editor's unsaved state) or the key of a
    built-in one; without both the default built-in template is used.
    Without a quotation the sample preview quotation is rendered.
    """

    model_config = ConfigDict(populate_by_name=True)

    template: Optional[Dict[str, Any]] = None
    template_key: Optional[str] = Field(None, alias="templateKey")
    quotation: Optional[Dict[str, Any]] = None


class BuiltinTemplateOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    name: str
    description: str = ""
    is_default: bool = Field(False, alias="isDefault")
