"""Pydantic models for store sale items.

Wire names are camelCase (``unitPrice``, ``createdAt``) because the
remote backend owns the schema; Python code uses snake_case.
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SaleItem(CamelModel):
    """A sale item as stored by the remote backend."""

    model_config = ConfigDict(extra="allow")

    id: str | int
    name: str = ""
    description: str = ""
    quantity: float = 0
    unit_price: float = 0
    category: str = ""
    date: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("name", "description", "category", mode="before")
    @classmethod
    def null_text_as_empty(cls, v: object) -> object:
        """The backend may send null for text it never had."""
        return "" if v is None else v

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def null_number_as_zero(cls, v: object) -> object:
        return 0 if v is None else v

    @property
    def total_value(self) -> float:
        """Quantity multiplied by unit price."""
        return self.quantity * self.unit_price


class SaleItemCreate(CamelModel):
    """Payload for creating a sale item."""

    model_config = ConfigDict(extra="allow")

    name: Annotated[str, Field(min_length=1, description="Item name")]
    quantity: Annotated[float, Field(ge=0, description="Units sold")]
    unit_price: Annotated[float, Field(ge=0, description="Price per unit")]
    description: str | None = None
    category: str | None = None
    date: str | None = None


class SaleItemUpdate(CamelModel):
    """Payload for updating a sale item; every field is optional."""

    model_config = ConfigDict(extra="allow")

    name: Annotated[str | None, Field(min_length=1)] = None
    quantity: Annotated[float | None, Field(ge=0)] = None
    unit_price: Annotated[float | None, Field(ge=0)] = None
    description: str | None = None
    category: str | None = None
    date: str | None = None


class SalesSummary(CamelModel):
    """Totals over a list of sale items."""

    total_items: int = 0
    total_quantity: float = 0
    total_value: float = 0
    categories: int = 0


class SortField(str, Enum):
    """Fields a sale item list can be sorted by."""

    NAME = "name"
    DATE = "date"
    QUANTITY = "quantity"
    UNIT_PRICE = "unitPrice"
    CATEGORY = "category"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class SalesFilter(CamelModel):
    """Criteria for narrowing a sale item list."""

    category: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    search_query: str | None = None
