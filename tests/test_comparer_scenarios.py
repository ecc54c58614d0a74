from __future__ import annotations

from typing import Any

import pytest

from compare.comparer import (
    MESSAGE_DEPRECATED_NOT_REMOVED,
    MESSAGE_REMOVED_NOT_DEPRECATED,
    BreakingChangesComparer,
)
from errors import ModuleResolutionError
from symbols.models import Snapshot
from symbols.provider import VersionedProject

MODULE = "acme/widgets"


def _file(version: str, name: str = "Foo") -> str:
    return f"/data/cloned/{version}/vendor/acme/widgets/src/{name}.php"


def _class(version: str, name: str = "Foo", **fields: Any) -> dict[str, Any]:
    return {"name": name, "file": _file(version, name), "line": 5, **fields}


def _compare(
    from_classes: list[dict[str, Any]] | None = None,
    to_classes: list[dict[str, Any]] | None = None,
    from_functions: list[dict[str, Any]] | None = None,
    to_functions: list[dict[str, Any]] | None = None,
) -> BreakingChangesComparer:
    project = VersionedProject.from_snapshots(
        Snapshot.model_validate(
            {
                "version": "from",
                "classes": from_classes or [],
                "functions": from_functions or [],
            }
        ),
        Snapshot.model_validate(
            {
                "version": "to",
                "classes": to_classes or [],
                "functions": to_functions or [],
            }
        ),
    )
    comparer = BreakingChangesComparer()
    comparer.compare(project)
    return comparer


def test_removed_class_without_deprecation() -> None:
    comparer = _compare(from_classes=[_class("from")])

    actions = comparer.get_actions_to_take()
    changes = comparer.get_breaking_changes()

    assert actions[MODULE]["deprecate"]["class"]["Foo"]["message"] == (
        MESSAGE_REMOVED_NOT_DEPRECATED
    )
    removed = changes[MODULE]["removed"]["class"]["Foo"]
    assert removed["message"] == ""
    assert removed["apiType"] == "class"
    assert removed["file"] == _file("from")


def test_deprecated_method_not_removed() -> None:
    method = {
        "name": "bar",
        "visibility": "public",
        "is_deprecated": True,
        "deprecations": [["1.2.0", "Do not use this."]],
    }
    comparer = _compare(
        from_classes=[_class("from", methods=[method])],
        to_classes=[_class("to", methods=[dict(method, line=9)])],
    )

    actions = comparer.get_actions_to_take()
    changes = comparer.get_breaking_changes()

    remove = actions[MODULE]["remove"]["method"]["Foo::bar()"]
    assert remove["message"] == MESSAGE_DEPRECATED_NOT_REMOVED
    # Context for the removal action comes from the new version.
    assert remove["file"] == _file("to")
    assert remove["line"] == 9
    assert changes == {}


def test_property_visibility_widened() -> None:
    comparer = _compare(
        from_classes=[
            _class("from", properties=[{"name": "title", "visibility": "protected"}])
        ],
        to_classes=[_class("to", properties=[{"name": "title", "visibility": "public"}])],
    )

    changes = comparer.get_breaking_changes()

    assert list(changes[MODULE]) == ["visibility"]
    entry = changes[MODULE]["visibility"]["property"]["Foo->title"]
    assert entry["from"] == "protected"
    assert entry["to"] == "public"
    assert entry["class"] == "Foo"


def test_identical_symbols_produce_nothing() -> None:
    foo = {
        "is_final": True,
        "constants": [{"name": "LIMIT", "visibility": "public", "hint": [{"name": "int"}]}],
        "properties": [
            {"name": "title", "visibility": "public", "hint": [{"name": "string"}]},
            {"name": "config", "visibility": "private", "is_static": True, "default": [1, 2]},
        ],
        "methods": [
            {
                "name": "bar",
                "visibility": "public",
                "hint": [{"name": "Thing", "fqcn": "Acme\\Thing"}],
                "parameters": [
                    {"name": "a", "default": "'abc'", "hint": [{"name": "string"}]},
                    {"name": "rest", "variadic": True},
                ],
            }
        ],
    }
    function = {
        "name": "acme_go",
        "file": _file("from", "functions"),
        "parameters": [{"name": "x", "is_by_ref": True}],
    }

    comparer = _compare(
        from_classes=[_class("from", **foo)],
        to_classes=[_class("to", **foo)],
        from_functions=[function],
        to_functions=[dict(function, file=_file("to", "functions"))],
    )

    assert comparer.get_breaking_changes() == {}
    assert comparer.get_actions_to_take() == {}


def test_removed_internal_symbol_is_ignored() -> None:
    comparer = _compare(
        from_classes=[
            _class("from", is_internal=True),
            _class(
                "from",
                "Bar",
                methods=[{"name": "hidden", "visibility": "public", "is_internal": True}],
            ),
        ],
        to_classes=[_class("to", "Bar")],
    )

    assert comparer.get_breaking_changes() == {}
    assert comparer.get_actions_to_take() == {}


@pytest.mark.parametrize(
    ("prop", "symbol_kind", "ref"),
    [
        ({"visibility": "private", "is_static": True}, "config", "Foo->thing"),
        ({"visibility": "public"}, "property", "Foo->thing"),
        ({"visibility": "protected", "is_static": True}, "property", "Foo->thing"),
        ({"visibility": "private"}, "property", "Foo->thing"),
    ],
)
def test_config_and_property_dispatch(
    prop: dict[str, Any], symbol_kind: str, ref: str
) -> None:
    comparer = _compare(
        from_classes=[_class("from", properties=[{"name": "thing", **prop}])],
        to_classes=[_class("to")],
    )

    changes = comparer.get_breaking_changes()

    assert list(changes[MODULE]["removed"]) == [symbol_kind]
    assert ref in changes[MODULE]["removed"][symbol_kind]
    assert changes[MODULE]["removed"][symbol_kind][ref]["apiType"] == symbol_kind


def test_positional_parameter_rename() -> None:
    comparer = _compare(
        from_classes=[
            _class(
                "from",
                methods=[
                    {
                        "name": "bar",
                        "visibility": "public",
                        "parameters": [{"name": "a"}, {"name": "b"}],
                    }
                ],
            )
        ],
        to_classes=[
            _class(
                "to",
                methods=[
                    {
                        "name": "bar",
                        "visibility": "public",
                        "parameters": [{"name": "x"}, {"name": "b"}],
                    }
                ],
            )
        ],
    )

    changes = comparer.get_breaking_changes()

    assert list(changes[MODULE]) == ["renamed"]
    renamed = changes[MODULE]["renamed"]["param"]
    assert list(renamed) == ["Foo::bar($x)"]
    assert renamed["Foo::bar($x)"]["from"] == "a"
    assert renamed["Foo::bar($x)"]["to"] == "x"
    assert renamed["Foo::bar($x)"]["method"] == "bar"


def test_module_resolution_failure_is_fatal() -> None:
    broken = {"name": "Foo", "file": "/data/elsewhere/src/Foo.php"}

    with pytest.raises(ModuleResolutionError):
        _compare(from_classes=[broken])


def test_missing_and_present_are_exclusive() -> None:
    comparer = _compare(
        from_classes=[
            _class(
                "from",
                methods=[{"name": "gone", "visibility": "public", "hint": [{"name": "int"}]}],
            )
        ],
        to_classes=[_class("to")],
    )

    changes = comparer.get_breaking_changes()

    # A removed method is never also checked for signature changes.
    assert list(changes[MODULE]) == ["removed"]
    assert list(changes[MODULE]["removed"]["method"]) == ["Foo::gone()"]
