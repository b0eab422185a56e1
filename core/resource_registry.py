# core/resource_registry.py
from __future__ import annotations

import importlib
import logging
import pkgutil
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Type

from core.forms import FormSpec
from core.records import DomainRecord
from core.tables import ColumnSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoints:
    list: str
    create: str
    update: str
    delete: str
    detail: Optional[str] = None

    @staticmethod
    def item(base: str, rid: str) -> str:
        return f"{base.rstrip('/')}/{rid}"

    def update_path(self, rid: str) -> str:
        return self.item(self.update, rid)

    def delete_path(self, rid: str) -> str:
        return self.item(self.delete, rid)

    def detail_path(self, rid: str) -> str:
        if not self.detail:
            raise ValueError("Resource has no single-record endpoint")
        return self.item(self.detail, rid)


@dataclass(frozen=True)
class ResourceDefinition:
    name: str
    page_name: str
    title: str
    singular: str
    model: Type[DomainRecord]
    form: FormSpec
    columns: Tuple[ColumnSpec, ...]
    endpoints: Endpoints
    empty_message: str = "No records found"
    references: Tuple[str, ...] = ()          # resources side-loaded for reference fields
    reference_label: str = "name"             # field shown when this resource is referenced
    fetch_detail_on_edit: bool = False
    read_only_roles: Optional[Tuple[str, ...]] = None   # None -> rbac.read_only_roles


# Registry: name -> definition
_REGISTRY: Dict[str, ResourceDefinition] = {}


def register(resource: ResourceDefinition) -> ResourceDefinition:
    existing = _REGISTRY.get(resource.name)
    # a module reload re-registers its own resource; anything else is a clash
    if existing is not None and existing.model.__module__ != resource.model.__module__:
        raise ValueError(f"Resource already registered: {resource.name}")
    _REGISTRY[resource.name] = resource
    return resource


def get_resource(name: str) -> ResourceDefinition:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown resource: {name}") from None


def all_resources() -> List[ResourceDefinition]:
    return list(_REGISTRY.values())


def auto_discover(package: str = "schemas", importer: Callable[[str], object] = importlib.import_module) -> List[str]:
    """
    Imports every module of a package so their register() calls run.
    Returns the imported module names.
    """
    pkg = importer(package)
    found = []
    for _, module_name, is_pkg in pkgutil.walk_packages(getattr(pkg, "__path__", []), prefix=f"{package}."):
        if is_pkg:
            continue
        importer(module_name)
        logger.debug("Discovered resource module %s", module_name)
        found.append(module_name)
    return found
