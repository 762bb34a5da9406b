"""Tool registration and dispatch for the Hemnet search operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    TypeVar,
    get_type_hints,
)

from pydantic import BaseModel, ValidationError

from hemnet_search.services.listings.models import HemnetError

if TYPE_CHECKING:
    from hemnet_search.services.listings.service import ListingSearchService

logger = logging.getLogger("hemnet.tools")


@dataclass
class ToolSpec:
    """Specification describing a registered tool."""

    name: str
    description: str
    schema: Optional[type[BaseModel]]
    func: Callable[..., Dict[str, Any]]


@dataclass
class ToolContext:
    """Context passed to tools that request it."""

    service: "ListingSearchService"


F = TypeVar("F", bound=Callable[..., Any])


def tool(
    name: str, description: str, schema: Optional[type[BaseModel]] = None
) -> Callable[[F], F]:
    """Register a function as a Tool via decorator."""

    def decorator(func: F) -> F:
        spec = ToolSpec(name=name, description=description, schema=schema, func=func)
        setattr(func, "_tool_spec", spec)
        return func

    return decorator


def error_payload(category: str, message: str) -> Dict[str, Any]:
    return {"ok": False, "error": category, "message": message}


class UnknownToolError(KeyError):
    """Raised when a call names a tool that is not registered."""


class ToolBox:
    """Holds registered tools, validates arguments and runs them."""

    def __init__(
        self,
        service: "ListingSearchService",
        tools: Optional[Sequence[Callable[..., Any]]] = None,
    ) -> None:
        self.context = ToolContext(service=service)
        self.tool_specs: Dict[str, ToolSpec] = {}
        for func in tools or []:
            self.add_tool(func)

    def add_tool(self, func: Callable[..., Any]) -> None:
        """Register a function marked with @tool decorator."""
        spec: Optional[ToolSpec] = getattr(func, "_tool_spec", None)
        if not spec:
            raise ValueError(f"{func!r} is not decorated with @tool")
        if spec.name in self.tool_specs:
            raise ValueError(f"Tool '{spec.name}' already registered")
        self.tool_specs[spec.name] = spec

    def describe(self) -> List[Dict[str, Any]]:
        """Names, descriptions and JSON schemas of the registered tools."""
        out = []
        for spec in self.tool_specs.values():
            parameters: Dict[str, Any] = {"type": "object", "properties": {}, "required": []}
            if spec.schema:
                parameters = spec.schema.model_json_schema()
            out.append(
                {
                    "name": spec.name,
                    "description": spec.description,
                    "parameters": parameters,
                }
            )
        return out

    def call(self, name: str, args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a tool and always return a structured payload."""
        if name not in self.tool_specs:
            raise UnknownToolError(name)
        spec = self.tool_specs[name]
        args = dict(args or {})

        if spec.schema:
            try:
                args = spec.schema(**args).model_dump()
            except ValidationError as ve:
                return error_payload("invalid_input", f"Invalid arguments: {ve}")

        try:
            params = get_type_hints(spec.func)
            if any(p is ToolContext for p in params.values()):
                result = spec.func(args, ctx=self.context)
            else:
                result = spec.func(args)
        except HemnetError as exc:
            logger.warning("Tool %s failed (%s): %s", name, exc.category, exc.message)
            return error_payload(exc.category, exc.message)
        except Exception:  # pragma: no cover
            logger.exception("Unexpected error while running tool %s", name)
            return error_payload("internal", f"Tool '{name}' failed unexpectedly.")

        return {"ok": True, "result": result}
