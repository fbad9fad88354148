"""
API Scaffold — Documentation Generator
=======================================

What:  Builds an OpenAPI 3.1 document from a RouteRegistry.
Why:   Documentation is derived from the same descriptors the dispatcher
       serves, so docs and behaviour cannot drift apart.
How:   Walks modules → routes, registering one operation per (method,
       versioned path) into a DocumentBuilder, then assembles the document.
       The live router is never consulted.

Per route with a schema:
    requestBody  ← schema.body
    parameters   ← one entry per {name} in the path (+ query schema fields)
    200          ← schema.response (no content when absent)
    400 / 404    ← shared Error component, always present

Routes without any schema are left out of the document; they are still
served by the dispatcher.

Failure policy:
    A module whose routes cannot be described is logged and its paths are
    skipped; its tag is still listed and the rest of the document is
    still produced. A failure while assembling the
    document itself is logged and re-raised to the caller.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from apiscaffold.core.discovery import RouteModule, RouteRegistry
from apiscaffold.core.dispatcher import API_VERSION, versioned_path
from apiscaffold.core.routes import Route
from apiscaffold.core.schema import COMPONENT_REF_TEMPLATE, Schema
from apiscaffold.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.1.0"
JSON_CONTENT = "application/json"

ERROR_SCHEMA = Schema(ErrorResponse, name="Error")


def component_ref(name: str) -> Dict[str, str]:
    return {"$ref": COMPONENT_REF_TEMPLATE.format(model=name)}


class DocumentBuilder:
    """
    Accumulates paths, tags and schema components, then emits a document.

    Components are staged per module with `components` dicts passed to
    schema_node(), so a module that fails midway leaves nothing behind.
    """

    def __init__(self):
        self.paths: Dict[str, Dict[str, Any]] = {}
        self.schemas: Dict[str, Any] = {}
        self.tags: List[Dict[str, str]] = []

    def add_tag(self, name: str, description: str) -> None:
        if all(tag["name"] != name for tag in self.tags):
            self.tags.append({"name": name, "description": description})

    def add_schemas(self, components: Dict[str, Any]) -> None:
        for name, node in components.items():
            existing = self.schemas.get(name)
            if existing is not None and existing != node:
                logger.warning("Schema component '%s' defined twice with different shapes", name)
            self.schemas[name] = node

    def add_operation(self, method: str, path: str, operation: Dict[str, Any]) -> None:
        operations = self.paths.setdefault(path, {})
        key = method.lower()
        if key in operations:
            logger.warning("Duplicate operation %s %s; keeping the last one", method, path)
        operations[key] = operation

    @staticmethod
    def schema_node(schema: Schema, components: Dict[str, Any]) -> Dict[str, Any]:
        """
        Describe `schema`, hoisting its definitions into `components`.

        Named schemas become components and are returned as a $ref;
        anonymous ones are returned inline.
        """
        node = schema.describe(ref_template=COMPONENT_REF_TEMPLATE)
        components.update(node.pop("$defs", {}))
        if not schema.name:
            return node
        if set(node) != {"$ref"}:
            components[schema.name] = node
        return component_ref(schema.name)

    def build(
        self,
        info: Dict[str, Any],
        servers: List[Dict[str, str]],
    ) -> Dict[str, Any]:
        return {
            "openapi": OPENAPI_VERSION,
            "info": copy.deepcopy(info),
            "servers": copy.deepcopy(servers),
            "tags": copy.deepcopy(self.tags),
            "paths": copy.deepcopy(self.paths),
            "components": {"schemas": {name: copy.deepcopy(self.schemas[name]) for name in sorted(self.schemas)}},
        }


class DocumentationGenerator:
    """
    Produces the API document for a RouteRegistry.

    Each call to generate() starts from an empty builder, so regenerating
    over an unchanged registry yields an identical document.

    Usage:
        generator = DocumentationGenerator(title="API Reference", server_url="/api")
        document = generator.generate(registry)
    """

    def __init__(
        self,
        title: str = "API Reference",
        description: str = "API documentation with OpenAPI specification",
        version: str = API_VERSION,
        server_url: str = "/api",
        contact: Optional[Dict[str, str]] = None,
    ):
        self.title = title
        self.description = description
        self.version = version
        self.server_url = server_url or "/"
        self.contact = contact or {"name": "API Support", "email": "support@example.com"}

    def generate(self, registry: RouteRegistry) -> Dict[str, Any]:
        """
        Build the document.

        Raises:
            Exception: anything raised while assembling the document as a
                       whole (per-module failures are logged, not raised)
        """
        logger.info("Generating OpenAPI documentation for %d modules", len(registry))
        try:
            builder = DocumentBuilder()
            error_components: Dict[str, Any] = {}
            builder.schema_node(ERROR_SCHEMA, error_components)
            builder.add_schemas(error_components)

            for module in registry:
                builder.add_tag(module.title, f"{module.title} management endpoints")
                try:
                    self._add_module(builder, module)
                except Exception as e:
                    logger.error(
                        "Failed to document %s module: %s",
                        module.name,
                        str(e),
                        exc_info=True,
                    )
                    continue
                logger.info("Generated OpenAPI specs for %s module", module.title)

            document = builder.build(
                info={
                    "version": self.version,
                    "title": self.title,
                    "description": self.description,
                    "contact": dict(self.contact),
                },
                servers=[{"url": self.server_url, "description": "API Server"}],
            )
        except Exception as e:
            logger.error("Failed to generate OpenAPI documentation: %s", str(e), exc_info=True)
            raise

        logger.info(
            "OpenAPI documentation generated: %d paths, %d schemas",
            len(document["paths"]),
            len(document["components"]["schemas"]),
        )
        return document

    def _add_module(self, builder: DocumentBuilder, module: RouteModule) -> None:
        # Stage everything first; nothing reaches the builder if a route fails
        components: Dict[str, Any] = {}
        operations = []
        for route in module.routes:
            if route.schema is None:
                logger.debug("Not documenting %s %s (no schema)", route.method, route.path)
                continue
            operation = self._operation(builder, module, route, components)
            operations.append((route.method, versioned_path(module.name, route.path), operation))

        builder.add_schemas(components)
        for method, path, operation in operations:
            builder.add_operation(method, path, operation)

    def _operation(
        self,
        builder: DocumentBuilder,
        module: RouteModule,
        route: Route,
        components: Dict[str, Any],
    ) -> Dict[str, Any]:
        schema = route.schema
        label = f"{route.method} {module.title}{' list' if route.path.rstrip('/') == '' else ''}"

        operation: Dict[str, Any] = {
            "operationId": f"{module.name}_{route.handler.__name__}",
            "summary": route.summary or label,
            "description": route.description or f"{label} endpoint",
            "tags": list(route.tags) or [module.title],
        }

        parameters = self._path_parameters(route, components)
        if schema.query is not None:
            parameters.extend(_object_parameters(schema.query, "query", components))
        if parameters:
            operation["parameters"] = parameters

        if schema.body is not None:
            operation["requestBody"] = {
                "required": True,
                "content": {JSON_CONTENT: {"schema": builder.schema_node(schema.body, components)}},
            }

        success: Dict[str, Any] = {"description": "Successful response"}
        if schema.response is not None:
            success["content"] = {
                JSON_CONTENT: {"schema": builder.schema_node(schema.response, components)}
            }
        operation["responses"] = {
            "200": success,
            "400": _error_response("Bad request"),
            "404": _error_response("Not found"),
        }
        return operation

    def _path_parameters(self, route: Route, components: Dict[str, Any]) -> List[Dict[str, Any]]:
        declared: Dict[str, Dict[str, Any]] = {}
        if route.schema.params is not None:
            declared = {p["name"]: p for p in _object_parameters(route.schema.params, "path", components)}

        parameters = []
        for name in route.path_params:
            parameters.append(
                declared.get(name)
                or {
                    "name": name,
                    "in": "path",
                    "required": True,
                    "description": "Resource ID" if name == "id" else f"Path parameter '{name}'",
                    "schema": {"type": "string"},
                }
            )
        return parameters


def _object_parameters(schema: Schema, location: str, components: Dict[str, Any]) -> List[Dict[str, Any]]:
    """One OpenAPI parameter per property of an object schema."""
    node = schema.describe(ref_template=COMPONENT_REF_TEMPLATE)
    components.update(node.pop("$defs", {}))
    required = set(node.get("required", []))

    parameters = []
    for name, prop in node.get("properties", {}).items():
        prop = dict(prop)
        parameter: Dict[str, Any] = {
            "name": name,
            "in": location,
            "required": location == "path" or name in required,
        }
        description = prop.pop("description", None)
        if description:
            parameter["description"] = description
        elif location == "path" and name == "id":
            parameter["description"] = "Resource ID"
        prop.pop("title", None)
        parameter["schema"] = prop
        parameters.append(parameter)
    return parameters


def _error_response(description: str) -> Dict[str, Any]:
    return {
        "description": description,
        "content": {JSON_CONTENT: {"schema": component_ref(ERROR_SCHEMA.name)}},
    }
