from __future__ import annotations

from typing import Any

from compare.comparer import BreakingChangesComparer
from compare.extensions import MESSAGE_UNEXPECTED_FORMAT, resolve_extensions
from rules.relations import RELATION_RULES, is_relation_config
from symbols.models import Snapshot
from symbols.provider import VersionedProject
from symbols.table import SymbolTable

MODULE = "acme/widgets"
DATA_OBJECT = "SilverStripe\\ORM\\DataObject"
EXTENSION = "SilverStripe\\Core\\Extension"


def _file(version: str, name: str) -> str:
    return f"/data/cloned/{version}/vendor/acme/widgets/src/{name}.php"


def _framework(version: str) -> list[dict[str, Any]]:
    return [
        {
            "name": name,
            "file": f"/data/cloned/{version}/vendor/silverstripe/framework/src/{name}.php",
            "is_project": False,
        }
        for name in (DATA_OBJECT, EXTENSION)
    ]


def _config(name: str, default: Any) -> dict[str, Any]:
    return {"name": name, "visibility": "private", "is_static": True, "default": default}


def _class(version: str, name: str, **fields: Any) -> dict[str, Any]:
    return {"name": name, "file": _file(version, name.rsplit("\\", 1)[-1]), **fields}


def _compare(
    from_classes: list[dict[str, Any]], to_classes: list[dict[str, Any]]
) -> BreakingChangesComparer:
    project = VersionedProject.from_snapshots(
        Snapshot.model_validate(
            {"version": "from", "classes": _framework("from") + from_classes}
        ),
        Snapshot.model_validate({"version": "to", "classes": _framework("to") + to_classes}),
    )
    comparer = BreakingChangesComparer()
    comparer.compare(project)
    return comparer


def test_relation_rules_cover_orm_config() -> None:
    assert [rule.config_name for rule in RELATION_RULES] == [
        "db",
        "fixed_fields",
        "has_one",
        "belongs_to",
        "has_many",
        "belongs_many_many",
        "many_many",
    ]
    assert is_relation_config("has_one")
    assert not is_relation_config("extensions")


def test_db_fields_and_relations() -> None:
    gadget_from = _class(
        "from",
        "Gadget",
        parent=DATA_OBJECT,
        properties=[
            _config("db", {"Title": "'Varchar'", "Count": "'Int'"}),
            _config("has_one", {"Owner": "Acme\\Member"}),
            _config("has_many", {"Parts": "Acme\\Part"}),
            _config(
                "many_many",
                {
                    "Tags": "Acme\\Tag",
                    "Links": {"through": "Acme\\Link", "from": "Gadget", "to": "Target"},
                },
            ),
        ],
    )
    gadget_to = _class(
        "to",
        "Gadget",
        parent=DATA_OBJECT,
        properties=[
            _config("db", {"Title": "'Varchar'"}),
            _config("has_one", {"Owner": {"class": "Acme\\Member", "multirelational": "true"}}),
            _config("has_many", {"Parts": "Acme\\Piece"}),
            _config(
                "many_many",
                {
                    "Tags": {"through": "Acme\\TagLink", "from": "Gadget", "to": "Tag"},
                    "Links": {"through": "Acme\\LinkV2", "from": "Gadget", "to": "Target"},
                },
            ),
        ],
    )

    changes = _compare([gadget_from], [gadget_to]).get_breaking_changes()[MODULE]

    removed = changes["removed"]["db"]["Gadget.db-Count"]
    assert removed == {"name": "Count", "apiType": "database field", "class": "Gadget"}
    assert changes["multirelational"]["has_one"]["Gadget.has_one-Owner"]["isNow"] is True
    assert "has_one" not in changes["type"]
    parts = changes["type"]["has_many"]["Gadget.has_many-Parts"]
    assert (parts["from"], parts["to"]) == ("Acme\\Part", "Acme\\Piece")
    assert changes["through"]["many_many"]["Gadget.many_many-Tags"]["isNow"] is True
    assert "Gadget.many_many-Links" in changes["through-data"]["many_many"]
    # Relation config is compared in detail, never as a plain config value.
    assert "default-array" not in changes


def test_relation_config_on_other_classes_is_plain_config() -> None:
    changes = _compare(
        [_class("from", "Plain", properties=[_config("db", {"Title": "'Varchar'"})])],
        [_class("to", "Plain", properties=[_config("db", {"Title": "'Text'"})])],
    ).get_breaking_changes()[MODULE]

    assert list(changes) == ["default-array"]
    assert "Plain->db" in changes["default-array"]["config"]


def _extension(version: str, **fields: Any) -> dict[str, Any]:
    return _class(version, "Acme\\Widgets\\GadgetExtension", parent=EXTENSION, **fields)


def test_extension_api_is_checked_on_the_extension() -> None:
    extensions = _config("extensions", ["Acme\\Widgets\\GadgetExtension"])
    comparer = _compare(
        [
            _class("from", "Gadget", parent=DATA_OBJECT, properties=[extensions]),
            _extension(
                "from",
                methods=[{"name": "extra", "visibility": "public"}],
                properties=[_config("db", {"Extra": "'Int'"})],
            ),
        ],
        [
            _class("to", "Gadget", parent=DATA_OBJECT, properties=[extensions]),
            _extension("to"),
        ],
    )

    changes = comparer.get_breaking_changes()[MODULE]

    assert list(changes["removed"]["method"]) == ["Acme\\Widgets\\GadgetExtension::extra()"]
    # Extension db fields are merged into the extended class.
    assert set(changes["removed"]["db"]) == {
        "Gadget.db-Extra",
        "Acme\\Widgets\\GadgetExtension.db-Extra",
    }


def test_unexpected_extension_references_need_fixing() -> None:
    comparer = _compare(
        [_class("from", "Gadget", properties=[_config("extensions", ["'Quoted'"])])],
        [_class("to", "Gadget", properties=[_config("extensions", ["Missing\\Extension"])])],
    )

    actions = comparer.get_actions_to_take()[MODULE]["deprecate"]["class"]

    assert actions["Gadget"]["message"] == (
        "The 'Missing\\Extension' class referenced in the $extensions configuration "
        "property doesn't exist."
    )


def test_resolve_extensions_reports_bad_format() -> None:
    snapshot = Snapshot.model_validate(
        {
            "version": "from",
            "classes": [
                _class(
                    "from",
                    "Gadget",
                    properties=[_config("extensions", [["nested"], "Acme\\Ext"])],
                ),
                _class("from", "Acme\\Ext"),
            ],
        }
    )
    table = SymbolTable(snapshot)

    extensions, issues = resolve_extensions(table, table.get_class("Gadget"))

    assert list(extensions) == ["Acme\\Ext"]
    assert issues == [MESSAGE_UNEXPECTED_FORMAT]
