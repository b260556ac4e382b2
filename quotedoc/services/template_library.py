from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from quotedoc.schemas.quotation import Quotation, coerce_quotation
from quotedoc.schemas.template import Template, coerce_template

logger = logging.getLogger(__name__)

CATALOG_DIR = Path(__file__).resolve().parents[1] / "catalogs"
TEMPLATES_PATH = CATALOG_DIR / "templates.yaml"
SAMPLE_QUOTATION_PATH = CATALOG_DIR / "sample_quotation.yaml"


def catalog_path(path: Optional[str] = None) -> Path:
    """Packaged template catalog unless another YAML file is named."""
    return Path(path) if path else TEMPLATES_PATH


@lru_cache(maxsize=4)
def _load_yaml(path: str) -> Any:
    """
    Read a YAML catalog once and cache the raw structure.
    A missing or broken file behaves like an empty catalog.
    """
    p = Path(path)
    if not p.exists():
        logger.warning("Catalog %s not found", p)
        return {}
    try:
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read catalog %s: %s", p, e)
        return {}


def _raw_entries(raw: Any) -> List[Dict[str, Any]]:
    """
    Supports both layouts:

      1) templates: [ {...}, {...} ]
      2) [ {...}, {...} ]
    """
    src = (raw.get("templates") or []) if isinstance(raw, dict) else raw
    if isinstance(src, dict):
        src = [dict(v, key=v.get("key") or k) for k, v in src.items() if isinstance(v, dict)]
    if not isinstance(src, list):
        return []
    return [item for item in src if isinstance(item, dict)]


def _slug(value: str) -> str:
    return "-".join(value.lower().split())


def load_builtin_templates(path: Optional[str] = None) -> Dict[str, Template]:
    """
    Built-in templates keyed by slug, in catalog order. Each template's id is
    its key unless the catalog entry carries its own `_id`.
    """
    templates: Dict[str, Template] = {}
    for idx, item in enumerate(_raw_entries(_load_yaml(str(catalog_path(path))))):
        key = str(item.get("key") or _slug(str(item.get("name") or "")) or f"template_{idx}")
        payload = {k: v for k, v in item.items() if k != "key"}
        payload.setdefault("_id", key)
        templates[key] = coerce_template(payload)
    return templates


def list_builtin_templates(path: Optional[str] = None) -> List[Dict[str, Any]]:
    return [
        {
            "key": key,
            "name": tpl.name,
            "description": tpl.description,
            "isDefault": tpl.is_default,
        }
        for key, tpl in load_builtin_templates(path).items()
    ]


def get_builtin_template(key: str, path: Optional[str] = None) -> Optional[Template]:
    """Look up by slug ('corporate-blue') or display name ('Corporate Blue'), case-insensitive."""
    if not key:
        return None
    templates = load_builtin_templates(path)
    wanted = key.strip().lower()
    if wanted in templates:
        return templates[wanted]
    for slug, tpl in templates.items():
        if slug.lower() == wanted or tpl.name.lower() == wanted:
            return tpl
    return None


def default_template(path: Optional[str] = None) -> Template:
    """The catalog template flagged isDefault, else the first one, else all defaults."""
    templates = list(load_builtin_templates(path).values())
    for tpl in templates:
        if tpl.is_default:
            return tpl
    if templates:
        return templates[0]
    return Template()


def sample_quotation() -> Quotation:
    """Preview record the template editor renders against."""
    return coerce_quotation(_load_yaml(str(SAMPLE_QUOTATION_PATH)))


def clear_cache() -> None:
    _load_yaml.cache_clear()
