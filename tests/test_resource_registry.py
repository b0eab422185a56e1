from __future__ import annotations

import pytest

from core import resource_registry
from core.forms import FormSpec
from core.records import DomainRecord
from core.resource_registry import (
    Endpoints,
    ResourceDefinition,
    all_resources,
    auto_discover,
    get_resource,
    register,
)


class Visitor(DomainRecord):
    name: str = ""


def _definition(name: str) -> ResourceDefinition:
    return ResourceDefinition(
        name=name,
        page_name="Visitors",
        title="Visitors",
        singular="Visitor",
        model=Visitor,
        form=FormSpec(fields=()),
        columns=(),
        endpoints=Endpoints("/visitor/all", "/visitor/create", "/visitor/update", "/visitor/delete"),
    )


def test_builtin_resources_registered():
    names = {r.name for r in all_resources()}
    assert {"students", "library", "staff", "fees"} <= names
    assert get_resource("library").references == ("students",)
    assert get_resource("students").fetch_detail_on_edit


def test_endpoint_paths():
    ep = get_resource("students").endpoints
    assert ep.update_path("s1") == "/student/update/s1"
    assert ep.delete_path("s1") == "/student/delete/s1"
    assert ep.detail_path("s1") == "/student/profile/s1"
    with pytest.raises(ValueError):
        get_resource("staff").endpoints.detail_path("t1")


def test_unknown_resource():
    with pytest.raises(KeyError, match="Unknown resource"):
        get_resource("parking")


def test_register_rejects_a_clash():
    with pytest.raises(ValueError):
        register(_definition("students"))


def test_reregistering_from_the_same_module(monkeypatch):
    monkeypatch.setattr(resource_registry, "_REGISTRY", dict(resource_registry._REGISTRY))
    register(_definition("visitors"))
    register(_definition("visitors"))
    assert get_resource("visitors").model is Visitor
    assert "visitors" in {r.name for r in all_resources()}


def test_auto_discover_imports_schema_modules():
    found = auto_discover("schemas")
    assert {
        "schemas.students_schema",
        "schemas.library_history_schema",
        "schemas.staff_schema",
        "schemas.fees_schema",
    } <= set(found)
