"""Item model."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """A priced catalog item."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        ...,
        description="Item ID (ObjectId hex)"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Item name"
    )
    price: float = Field(
        ...,
        ge=0,
        description="Price, greater than or equal to 0"
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional free-text description"
    )
    created_at: datetime = Field(
        ...,
        alias="createdAt",
        description="Creation timestamp"
    )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Item":
        return cls(
            id=str(document["_id"]),
            name=document["name"],
            price=document["price"],
            description=document.get("description"),
            created_at=document["created_at"]
        )

    def price_with_tax(self, tax_rate: float = 0.1) -> float:
        """
        Price including tax.

        Args:
            tax_rate: Tax rate as a decimal (0.1 for 10%)
        """
        return self.price * (1 + tax_rate)

    def to_response(self) -> Dict[str, Any]:
        """JSON-ready dict using API field names."""
        return self.model_dump(mode="json", by_alias=True)
