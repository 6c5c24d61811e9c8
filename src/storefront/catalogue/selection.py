"""Attribute selections made by a shopper for one cart line."""

import json
from dataclasses import dataclass


@dataclass(frozen=True)
class AttributeSelection:
    """A chosen (attribute, value) pair. ``value_id`` is None for free-form attributes."""

    attribute_id: str
    value_id: str | None = None

    @classmethod
    def from_raw(cls, raw):
        if isinstance(raw, AttributeSelection):
            return raw
        attribute_id = raw.get("attribute_id")
        value_id = raw.get("value_id")
        return cls(
            attribute_id=str(attribute_id) if attribute_id is not None else None,
            value_id=str(value_id) if value_id else None,
        )

    def to_dict(self):
        return {"attribute_id": self.attribute_id, "value_id": self.value_id}


def normalize_selections(raw_selections) -> list[AttributeSelection]:
    """Parse selections and collapse duplicate attribute ids, keeping the first occurrence."""
    seen = set()
    normalized = []
    for raw in raw_selections or []:
        selection = AttributeSelection.from_raw(raw)
        if selection.attribute_id in seen:
            continue
        seen.add(selection.attribute_id)
        normalized.append(selection)
    return normalized


def dump_selections(selections) -> str:
    return json.dumps([s.to_dict() for s in selections])


def load_selections(payload) -> list[AttributeSelection]:
    if not payload:
        return []
    raw = json.loads(payload) if isinstance(payload, str) else payload
    return [AttributeSelection.from_raw(item) for item in raw]
