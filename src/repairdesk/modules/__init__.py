"""Feature modules with auto-discovery."""

from importlib import import_module
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Return the routers of every module package that defines one.

    Packages without a ``router`` attribute (such as ``users``, which is
    read-only support code) are skipped. Import errors propagate: a
    module that fails to import is a deployment bug, not an optional
    feature.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if path.is_dir() and not path.name.startswith("_"):
            module = import_module(f"repairdesk.modules.{path.name}")
            router = getattr(module, "router", None)
            if router is not None:
                routers.append(router)
                logger.debug("module_loaded", module=path.name)

    return routers
