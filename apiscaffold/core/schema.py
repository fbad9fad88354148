"""
API Scaffold — Schema Capability
=================================

What:  One declaration, two views: a validator and a documentation emitter.
Why:   The dispatcher validates payloads and the documentation generator
       describes them; both must read the same declaration or they drift.
How:   A Schema wraps any pydantic-typed declaration (a model class, a
       List[Model], an Annotated constraint...) in a TypeAdapter.
       validate() and dump() run the adapter's core validator/serializer,
       describe() asks the same adapter for its JSON schema.

Wire format:
    Python field names are snake_case; ApiModel aliases them to camelCase
    on the wire (user_id ↔ userId). Client input is matched by the wire
    name only, so anything validate(..., by_name=False) accepts also fits
    the describe() schema. Handler return values and store records may use
    either name.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from apiscaffold.exceptions import SchemaValidationError

# Standalone documents keep their definitions next to the node
LOCAL_REF_TEMPLATE = "#/$defs/{model}"
# Definitions hoisted into an OpenAPI document
COMPONENT_REF_TEMPLATE = "#/components/schemas/{model}"


class ApiModel(BaseModel):
    """Base class for request/response models: camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def violations_from(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """
    Flatten a pydantic ValidationError into field-level violations.

    Example:
        [{"field": "email", "message": "Field required", "type": "missing"}]
    """
    violations = []
    for error in exc.errors(include_url=False):
        violations.append(
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )
    return violations


class Schema:
    """
    Declarative value shape with a validator view and a describer view.

    Args:
        declaration: Anything pydantic can build a TypeAdapter for.
        name:        Component name used in the API document. Defaults to
                     the class name for models; other declarations are
                     inlined unless named.

    Example:
        TodoList = Schema(List[Todo], name="TodoList")
        todos = TodoList.validate(raw)      # List[Todo] or SchemaValidationError
        TodoList.dump(todos)                # JSON-ready, camelCase keys
        TodoList.describe()                 # JSON schema with $defs
    """

    def __init__(self, declaration: Any, name: Optional[str] = None):
        self.declaration = declaration
        self.name = name or _default_name(declaration)
        self._adapter = TypeAdapter(declaration)

    def validate(self, value: Any, by_name: bool = True) -> Any:
        """
        Validate and coerce `value`; defaults are applied.

        by_name=False accepts wire (alias) keys only, as for request input.
        """
        try:
            return self._adapter.validate_python(value, by_alias=True, by_name=by_name)
        except PydanticValidationError as exc:
            raise SchemaValidationError(violations_from(exc)) from exc

    def dump(self, value: Any) -> Any:
        """Serialize a validated value to JSON-compatible Python data."""
        return self._adapter.dump_python(value, mode="json", by_alias=True)

    def describe(self, ref_template: str = LOCAL_REF_TEMPLATE) -> Dict[str, Any]:
        """JSON schema node for this declaration (validation mode)."""
        return self._adapter.json_schema(by_alias=True, ref_template=ref_template)

    def field_names(self) -> List[str]:
        """Top-level property names on the wire, for object schemas."""
        return list(self.describe().get("properties", {}))

    def __repr__(self) -> str:
        return f"Schema({self.name or self.declaration!r})"


def as_schema(value: Any) -> Optional[Schema]:
    """Accept a Schema, a model class or any pydantic type; None stays None."""
    if value is None or isinstance(value, Schema):
        return value
    return Schema(value)


def _default_name(declaration: Any) -> Optional[str]:
    if isinstance(declaration, type) and issubclass(declaration, BaseModel):
        return declaration.__name__
    return None
