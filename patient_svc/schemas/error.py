"""
Pydantic schema for failure payloads.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorResponse(BaseModel):
    """Body of every non-2xx response that carries content.

    Built fresh for each failed request and never stored.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "timestamp": "2025-01-01T10:00:00.000000Z",
                "statusCode": 404,
                "message": "Patient not found",
                "detail": "Patient not found with id: 42"
            }
        },
    )

    timestamp: datetime = Field(..., description="UTC time the failure was produced")
    status_code: int = Field(..., description="HTTP status code of the response")
    message: str = Field(..., description="Short description of what failed")
    detail: str = Field("", description="Underlying error text, empty when none")
