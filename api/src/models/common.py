"""Response envelope shared by every endpoint."""

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Envelope: ``{success, message, data?}``."""

    success: bool = Field(
        ...,
        description="Whether the request succeeded"
    )
    message: str = Field(
        ...,
        description="Human readable outcome"
    )
    data: Optional[Any] = Field(
        default=None,
        description="Payload, omitted when there is none"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "message": "Item retrieved successfully",
                "data": {
                    "id": "665f1c2b9d3e4a0012345678",
                    "name": "Widget",
                    "price": 9.99,
                    "createdAt": "2025-01-15T10:30:00Z"
                }
            }
        }
    }

    def to_content(self) -> Dict[str, Any]:
        """Serialize the envelope, dropping ``data`` when absent."""
        content: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            content["data"] = jsonable_encoder(self.data)
        return content
