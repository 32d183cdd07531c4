"""Add-car form state and local validation.

Validation failures stay on the form as per-field messages; they never
reach the network and are never surfaced as global notifications.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from carcatalog.exceptions import CatalogValidationError
from carcatalog.models.car import NewCar

_URL_RE = re.compile(r"^https?://.+")

FORM_FIELDS = ("name", "description", "image_url", "car_type")


def _toggle(values: list[str], value: str) -> None:
    if value in values:
        values.remove(value)
    else:
        values.append(value)


@dataclass
class CarForm:
    """Mutable add-car form."""

    name: str = ""
    description: str = ""
    image_url: str = ""
    car_type: str = ""
    tags: list[str] = field(default_factory=list)
    specifications: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def blank(cls, car_types: Sequence[str] = ()) -> CarForm:
        """Fresh form; the car type preselects the first known type."""
        return cls(car_type=car_types[0] if car_types else "")

    def set_field(self, name: str, value: str) -> None:
        """Update a text field and clear its inline error."""
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        setattr(self, name, value)
        self.errors.pop(name, None)

    def toggle_tag(self, tag: str) -> None:
        _toggle(self.tags, tag)

    def toggle_specification(self, spec: str) -> None:
        _toggle(self.specifications, spec)

    def validate(self) -> dict[str, str]:
        """Check required fields; stores and returns the field errors."""
        errors: dict[str, str] = {}
        if not self.name.strip():
            errors["name"] = "Name is required"
        if not self.description.strip():
            errors["description"] = "Description is required"
        image_url = self.image_url.strip()
        if not image_url:
            errors["image_url"] = "Image URL is required"
        elif not _URL_RE.match(image_url):
            errors["image_url"] = "Please enter a valid URL"
        if not self.car_type:
            errors["car_type"] = "Car type is required"
        self.errors = errors
        return dict(errors)

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def to_new_car(self) -> NewCar:
        """Build the create body, raising `CatalogValidationError` if invalid."""
        errors = self.validate()
        if errors:
            raise CatalogValidationError(errors)
        return NewCar(
            name=self.name.strip(),
            description=self.description.strip(),
            image_url=self.image_url.strip(),
            car_type=self.car_type,
            tags=list(self.tags),
            specifications=list(self.specifications),
        )
