"""Expose the registered Hemnet tools over HTTP."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from hemnet_search.models.api_models import ToolList, ToolResponse
from hemnet_search.tools.tool import ToolBox, UnknownToolError

logger = logging.getLogger("hemnet.controllers")

tools_router = APIRouter(prefix="/tools", tags=["Tools"])


def get_toolbox(request: Request) -> ToolBox:
    """FastAPI dependency returning the toolbox built at startup."""
    return request.app.state.toolbox  # type: ignore[no-any-return]


@tools_router.get("", response_model=ToolList)
def list_tools(toolbox: ToolBox = Depends(get_toolbox)) -> ToolList:
    """Return the declared tools and their input schemas."""
    return ToolList(tools=toolbox.describe())


@tools_router.post(
    "/{name}",
    responses={
        200: {"model": ToolResponse, "description": "Tool result or error payload"},
        404: {"description": "Unknown tool"},
    },
)
def call_tool(
    name: str,
    args: Optional[Dict[str, Any]] = Body(default=None),
    toolbox: ToolBox = Depends(get_toolbox),
) -> ToolResponse:
    """
    Run a tool with the given arguments.

    Args:
        name (str): Registered tool name.
        args (dict): Flat tool arguments, validated against the tool schema.

    Returns:
        ToolResponse with either the result or an error category and message.
    """
    try:
        payload = toolbox.call(name, args or {})
    except UnknownToolError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown tool '{name}'"
        )
    logger.info("Tool %s finished (ok=%s)", name, payload["ok"])
    return ToolResponse(**payload)
