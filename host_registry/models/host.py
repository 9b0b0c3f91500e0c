from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Host(BaseModel):
    """
    Domain model describing a registered host document.

    Only the store-managed fields are declared; every other field the client
    posted is kept as an extra field and passed through unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(
        ...,
        alias="_id",
        description="Identifier assigned by the document store on creation",
    )
    created_at: Optional[datetime] = Field(
        None,
        alias="createdAt",
        description="Timestamp of the insert",
    )
    updated_at: Optional[datetime] = Field(
        None,
        alias="updatedAt",
        description="Timestamp of the last write; drives the staleness sweep",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        # ObjectId (or any other store id type) is exposed as a string
        if value is not None and not isinstance(value, str):
            return str(value)
        return value
