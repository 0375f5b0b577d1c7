"""Structured property-search filters and the tool definition that extracts them."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PropertyType(str, Enum):
    """Kinds of property a search can be restricted to."""

    ALL = "all"
    APARTMENT = "apartment"
    HOUSE = "house"
    COMMERCIAL = "commercial"
    WAREHOUSE = "warehouse"
    STUDIO = "studio"


class Filters(BaseModel):
    """Search constraints extracted from free text.

    Every field is optional; ``None`` means "no constraint", never zero.
    Instances are frozen and shared through the interpret cache; derive
    new filters with ``model_copy(update=...)``.
    Field names are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    radius: float | None = Field(default=None, gt=0, description="Radius in km")
    min_price: float | None = Field(default=None, alias="minPrice", ge=0)
    max_price: float | None = Field(default=None, alias="maxPrice", ge=0)
    bedrooms: int | None = Field(default=None, ge=0)
    property_type: PropertyType | None = Field(default=None, alias="propertyType")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Filters":
        """Build filters from a wire dictionary (camelCase keys)."""
        return cls.model_validate(data or {})

    def to_dict(self) -> dict[str, Any]:
        """Wire form: camelCase keys, absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def is_empty(self) -> bool:
        return not self.to_dict()


EXTRACT_FILTERS_FUNCTION = "extract_filters"

SYSTEM_INSTRUCTION = (
    "Extrae filtros de búsqueda de propiedades. "
    "Si no es una búsqueda de inmuebles, marca is_valid=false."
)

# Backend function schema. Property names must match the Filters aliases.
EXTRACT_FILTERS_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": EXTRACT_FILTERS_FUNCTION,
        "description": "Extrae los filtros de búsqueda de propiedades del texto del usuario",
        "parameters": {
            "type": "object",
            "properties": {
                "is_valid": {
                    "type": "boolean",
                    "description": "true si es búsqueda de inmuebles, false si no",
                },
                "radius": {
                    "type": "number",
                    "minimum": 1,
                    "maximum": 20,
                    "description": "Radio en km (1-20). Default 5.",
                },
                "minPrice": {
                    "type": "number",
                    "minimum": 0,
                    "description": "Precio mínimo COP",
                },
                "maxPrice": {
                    "type": "number",
                    "minimum": 0,
                    "description": "Precio máximo COP",
                },
                "bedrooms": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Habitaciones mínimas",
                },
                "propertyType": {
                    "type": "string",
                    "enum": [t.value for t in PropertyType],
                    "description": "Tipo de propiedad",
                },
            },
            "required": ["is_valid"],
            "additionalProperties": False,
        },
    },
}
