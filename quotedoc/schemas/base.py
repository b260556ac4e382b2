from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel, to_snake

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# upper bound on field repairs before giving up and using an all-defaults model
MAX_REPAIRS = 256


class CamelModel(BaseModel):
    """Frozen record that reads and writes the camelCase JSON shape of the storage API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        allow_inf_nan=False,
    )


def _plain_copy(value: Any) -> Any:
    """Copy nested dicts/lists so repairs never touch the caller's payload."""
    if isinstance(value, Mapping):
        return {k: _plain_copy(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain_copy(v) for v in value]
    return value


def _drop_path(data: Any, loc: tuple) -> bool:
    """
    Remove the value at `loc` (a pydantic error location) from `data`.
    Returns False when the location cannot be found.
    """
    if not loc:
        return False

    target = data
    for part in loc[:-1]:
        if isinstance(target, dict):
            key = part if part in target else to_snake(str(part))
            if key not in target:
                return False
            target = target[key]
        elif isinstance(target, list) and isinstance(part, int):
            if part >= len(target):
                return False
            target = target[part]
        else:
            return False

    last = loc[-1]
    if isinstance(target, dict):
        for key in (last, to_snake(str(last))):
            if key in target:
                del target[key]
                return True
        return False
    if isinstance(target, list) and isinstance(last, int) and last < len(target):
        del target[last]
        return True
    return False


def coerce_model(model_cls: Type[M], payload: Any) -> M:
    """
    Build `model_cls` from an arbitrary JSON-shaped payload without ever failing.

    Fields that do not validate are dropped one at a time (so they fall back
    to their defaults) and validation is retried. A payload that is not a
    mapping at all gives an all-defaults model.
    """
    if isinstance(payload, model_cls):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True)
    if not isinstance(payload, Mapping):
        if payload is not None:
            logger.debug("%s payload is %s, using defaults", model_cls.__name__, type(payload).__name__)
        return model_cls()

    data = _plain_copy(payload)
    dropped: List[str] = []
    for _ in range(MAX_REPAIRS):
        try:
            model = model_cls.model_validate(data)
        except ValidationError as exc:
            loc = tuple(exc.errors()[0]["loc"])
            if not _drop_path(data, loc):
                logger.debug("Could not repair %s at %s, using defaults", model_cls.__name__, loc)
                break
            dropped.append(".".join(str(p) for p in loc))
            continue
        if dropped:
            logger.debug("Invalid %s fields fell back to defaults: %s", model_cls.__name__, ", ".join(dropped))
        return model

    return model_cls()
