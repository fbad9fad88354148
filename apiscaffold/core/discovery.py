"""
API Scaffold — Route Discovery
===============================

What:  Collects the `routes` exported by every configured route module into
       a RouteRegistry, keyed by module name.
Why:   Both the dispatcher and the documentation generator start from the
       same registry, so a route is documented exactly as it is served.
How:   An explicit registration list of dotted module paths
       (settings.route_modules) is imported with importlib. Modules can also
       be registered programmatically with RouteRegistry.register().

Module naming:
    apiscaffold.modules.todos.routes  →  "todos"   (parent package)
    myapp.billing                     →  "billing" (last segment)

Failure policy:
    A module that fails to import, has no `routes`, or exports something
    other than a sequence of Route objects is logged and skipped. One bad
    module never stops the others from loading.

Hot reload (development):
    With reload=True, modules that are already imported are re-executed
    with importlib.reload(), so rediscovery reflects edits on disk.
"""

import importlib
import logging
import sys
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from apiscaffold.core.routes import Route
from apiscaffold.exceptions import DiscoveryError

logger = logging.getLogger(__name__)

ROUTES_ATTRIBUTE = "routes"


@dataclass(frozen=True)
class RouteModule:
    """A named group of route descriptors and where they came from."""

    name: str
    routes: Tuple[Route, ...]
    source: str

    @property
    def title(self) -> str:
        """Display name used for documentation tags ("todos" → "Todos")."""
        return self.name[:1].upper() + self.name[1:]


class RouteRegistry:
    """
    Ordered mapping of module name → RouteModule.

    Iteration yields modules in registration order, which is also the
    mount order and the order of tags in the API document.
    """

    def __init__(self):
        self._modules: Dict[str, RouteModule] = {}
        self.skipped: List[DiscoveryError] = []

    def register(self, name: str, routes: Sequence[Route], source: str = "<registered>") -> RouteModule:
        """
        Register a module's routes.

        Raises:
            DiscoveryError: duplicate name or malformed route sequence
        """
        if name in self._modules:
            raise DiscoveryError(
                module=source,
                message=f"Module name '{name}' is already registered",
                context={"existing_source": self._modules[name].source},
            )
        module = RouteModule(name=name, routes=_check_routes(routes, source), source=source)
        self._modules[name] = module
        return module

    def get(self, name: str) -> Optional[RouteModule]:
        return self._modules.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._modules)

    def __iter__(self) -> Iterator[RouteModule]:
        return iter(list(self._modules.values()))

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._modules


def module_name_for(import_path: str) -> str:
    """Derive the mount name from a dotted import path."""
    parts = import_path.split(".")
    if len(parts) > 1 and parts[-1] == ROUTES_ATTRIBUTE:
        return parts[-2]
    return parts[-1]


def load_routes(import_path: str, reload: bool = False) -> Sequence[Route]:
    """
    Import `import_path` and return its `routes` attribute.

    Raises:
        DiscoveryError: import failed or `routes` is missing
    """
    try:
        if reload and import_path in sys.modules:
            module = importlib.reload(sys.modules[import_path])
        else:
            module = importlib.import_module(import_path)
    except Exception as e:
        raise DiscoveryError(
            module=import_path,
            message=f"Failed to import route module: {e}",
            context={"error_type": type(e).__name__},
        ) from e

    if not hasattr(module, ROUTES_ATTRIBUTE):
        raise DiscoveryError(
            module=import_path,
            message=f"Module does not export a '{ROUTES_ATTRIBUTE}' sequence",
        )
    return getattr(module, ROUTES_ATTRIBUTE)


def discover_routes(import_paths: Iterable[str], reload: bool = False) -> RouteRegistry:
    """
    Build a RouteRegistry from the registration list.

    Args:
        import_paths: dotted module paths, in mount order
        reload:       re-execute already-imported modules (hot reload)

    Returns:
        RouteRegistry with every module that loaded cleanly. Modules that
        failed are listed in `registry.skipped`.
    """
    registry = RouteRegistry()
    paths = list(import_paths)
    logger.info("Discovering routes in %d module(s)%s", len(paths), " (reload)" if reload else "")

    for import_path in paths:
        name = module_name_for(import_path)
        try:
            routes = load_routes(import_path, reload=reload)
            module = registry.register(name, routes, source=import_path)
        except DiscoveryError as e:
            registry.skipped.append(e)
            logger.warning("Skipping route module %s: %s", import_path, e.message)
            continue
        logger.info("Loaded %s module (%d routes) from %s", name, len(module.routes), import_path)

    logger.info(
        "Route discovery complete: %d loaded, %d skipped",
        len(registry),
        len(registry.skipped),
    )
    return registry


def _check_routes(routes: Sequence[Route], source: str) -> Tuple[Route, ...]:
    if not isinstance(routes, (list, tuple)):
        raise DiscoveryError(
            module=source,
            message=f"'{ROUTES_ATTRIBUTE}' must be a list or tuple, got {type(routes).__name__}",
        )
    bad = [i for i, route in enumerate(routes) if not isinstance(route, Route)]
    if bad:
        raise DiscoveryError(
            module=source,
            message=f"'{ROUTES_ATTRIBUTE}' entries {bad} are not Route descriptors",
        )
    return tuple(routes)
