"""Attribute selection validation.

Attributes are data: a choice is a generic ``(attribute_id, value_id)`` pair
that must appear in the product's mapping set. Valid choices are returned with
their display names so the order can keep a snapshot of them.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.attribute import ProductAttribute
from storefront.catalogue.selection import normalize_selections
from storefront.checkout.errors import InvalidAttributeSelection, NoAttributesDefined


@dataclass(frozen=True)
class ResolvedAttribute:
    attribute_id: str
    value_id: str | None
    attribute_name: str
    value: str | None


def selections_for(line, override):
    """Override selections for the line when supplied, else the ones stored on the cart."""
    if override is not None and override.attributes:
        return normalize_selections(override.attributes)
    return normalize_selections(line.item.selections)


def validate_selections(snapshot, overrides) -> dict[str, list[ResolvedAttribute]]:
    attributes = {}
    resolved = {}

    for line in snapshot.lines:
        selections = selections_for(line, overrides.get(line.line_id))
        resolved[line.line_id] = []
        if not selections:
            continue

        product = line.product
        if not product.attribute_mappings:
            raise NoAttributesDefined(product.name)

        for selection in selections:
            if not product.allows(selection.attribute_id, selection.value_id):
                raise InvalidAttributeSelection(product.name, selection.attribute_id, selection.value_id)

            if selection.attribute_id not in attributes:
                attributes[selection.attribute_id] = _load_attribute(selection.attribute_id)
            attribute = attributes[selection.attribute_id]

            resolved[line.line_id].append(
                ResolvedAttribute(
                    attribute_id=selection.attribute_id,
                    value_id=selection.value_id,
                    attribute_name=attribute.name if attribute else selection.attribute_id,
                    value=attribute.value_named(selection.value_id) if attribute else None,
                )
            )

    return resolved


def _load_attribute(attribute_id):
    try:
        return current_domain.repository_for(ProductAttribute).get(attribute_id)
    except ObjectNotFoundError:
        return None
