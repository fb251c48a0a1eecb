"""Partial-update merge shared by every cached entity.

Gateway events carry *fragments*: sparse dicts holding only the keys that
changed. :func:`apply_partial` writes each key onto the matching field of a
pydantic model, relying on ``validate_assignment`` to decode the value into
the field's type. A key that fails to decode is skipped and reported through
:func:`cordkit.output.debug`; the rest of the fragment still applies.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from cordkit.output import debug


@lru_cache(maxsize=None)
def _field_lookup(model: type[BaseModel]) -> dict[str, str]:
    """Map both JSON aliases and attribute names to attribute names."""
    lookup: dict[str, str] = {}
    for name, field in model.model_fields.items():
        lookup[name] = name
        if field.alias:
            lookup[field.alias] = name
    return lookup


def apply_partial(entity: BaseModel, fragment: Mapping[str, Any] | None) -> list[str]:
    """Overwrite the fields named in *fragment* and return their attribute names.

    Unknown keys and frozen fields (such as ``id``) are ignored.
    """
    if not fragment:
        return []

    model = type(entity)
    lookup = _field_lookup(model)
    changed: list[str] = []

    for key, value in fragment.items():
        name = lookup.get(key)
        if name is None or model.model_fields[name].frozen:
            continue
        try:
            setattr(entity, name, value)
        except ValidationError as exc:
            reason = exc.errors()[0]["msg"] if exc.errors() else str(exc)
            debug(f"Skipping '{key}' on {model.__name__} {getattr(entity, 'id', '?')}: {reason}")
            continue
        changed.append(name)

    return changed
