"""Tool specification models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolSpec(BaseModel):
    """A callable capability exposed by the tool registry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Unique tool reference")
    description: str = Field(default="", description="Human readable summary")
    input_schema: dict[str, Any] = Field(
        default_factory=dict,
        alias="inputSchema",
        description="JSON schema describing the tool arguments",
    )
