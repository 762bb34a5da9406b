"""Request and response models for the HTTP endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Data model for the healthcheck endpoint."""

    status: str = Field(..., description="Service status (ok).")
    name: str = Field(..., description="Service name.")
    version: str = Field(..., description="Service version.")


class ToolDescription(BaseModel):
    """Declared interface of a registered tool."""

    name: str = Field(..., description="Tool name used in calls.")
    description: str = Field(..., description="What the tool does.")
    parameters: Dict[str, Any] = Field(..., description="JSON schema of the arguments.")


class ToolResponse(BaseModel):
    """Outcome of a tool call: a result on success, or an error category and message."""

    ok: bool = Field(..., description="Whether the tool call succeeded.")
    result: Optional[Any] = Field(default=None, description="Serialized tool result.")
    error: Optional[str] = Field(default=None, description="Error category.")
    message: Optional[str] = Field(default=None, description="Human readable error.")


class ToolList(BaseModel):
    tools: List[ToolDescription]
