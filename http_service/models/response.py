"""
Response envelope returned by every ``HttpService`` verb.
"""

from typing import Dict, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class HttpServiceResponse(BaseModel, Generic[T]):
    """
    Normalized response.

    Fields:
        data: Decoded body, or the DTO (list of DTOs) built from it
        status_code: HTTP status code
        headers: Response headers
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True, frozen=True, populate_by_name=True
    )

    data: T = Field(..., description="Decoded (and optionally coerced) body")
    status_code: int = Field(..., alias="statusCode", description="HTTP status code")
    headers: Dict[str, str] = Field(default_factory=dict, description="Response headers")

    @property
    def statusCode(self) -> int:
        """Get status_code as statusCode (camelCase)."""
        return self.status_code
