# quotedoc/core/document.py
from __future__ import annotations

from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from quotedoc.core.geometry import PageGeometry
from quotedoc.core.sections import SectionOutput
from quotedoc.core.styles import ComputedStyleSheet


class PageRegion(BaseModel):
    """Header or footer chrome after interpolation. Identical on every page."""

    model_config = ConfigDict(frozen=True)

    html: str
    height: float


class Page(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    header: Optional[PageRegion] = None
    body: List[SectionOutput]
    footer: Optional[PageRegion] = None

    @property
    def used_height(self) -> float:
        return sum(s.height for s in self.body)


class Document(BaseModel):
    """Composed, paginated rendering of one template + quotation pair."""

    model_config = ConfigDict(frozen=True)

    title: str
    pages: List[Page]
    stylesheet: ComputedStyleSheet
    geometry: PageGeometry
    template_fingerprint: str

    @computed_field
    @property
    def page_count(self) -> int:
        return len(self.pages)

    def sections(self) -> Iterator[SectionOutput]:
        for page in self.pages:
            yield from page.body

    def section_ids(self) -> List[str]:
        return [s.id for s in self.sections()]
