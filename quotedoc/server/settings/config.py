from pydantic import BaseModel
from dotenv import load_dotenv
from typing import List, Optional
import math
import os

from quotedoc.core.sections import LayoutMetrics

load_dotenv()


def _float_env(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


class Settings(BaseModel):
    app_name: str = "Quotedoc - quotation rendering"
    environment: str = os.getenv("QUOTEDOC_ENV", "dev")
    debug: bool = os.getenv("QUOTEDOC_DEBUG", "0") == "1"
    log_level: str = os.getenv("QUOTEDOC_LOG_LEVEL", "INFO").upper()
    cors_origins: List[str] = [
        o.strip()
        for o in os.getenv("QUOTEDOC_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
        if o.strip()
    ]
    # empty -> packaged catalogs/templates.yaml
    templates_path: str = os.getenv("QUOTEDOC_TEMPLATES_PATH", "")
    row_padding_px: Optional[float] = _float_env("QUOTEDOC_ROW_PADDING_PX")
    section_gap_px: Optional[float] = _float_env("QUOTEDOC_SECTION_GAP_PX")

    def layout_metrics(self) -> LayoutMetrics:
        overrides = {}
        if self.row_padding_px is not None:
            overrides["row_padding"] = self.row_padding_px
        if self.section_gap_px is not None:
            overrides["section_gap"] = self.section_gap_px
        return LayoutMetrics(**overrides)


settings = Settings()
