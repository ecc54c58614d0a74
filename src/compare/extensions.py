"""API contributed to classes by explicitly applied extensions.

Public methods and configuration of extensions listed in a class's own
``$extensions`` config are considered part of that class's API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rules.relations import EXTENSIONS_CONFIG

if TYPE_CHECKING:
    from symbols.models import ClassSymbol, MethodSymbol, PropertySymbol
    from symbols.table import SymbolTable

MESSAGE_UNEXPECTED_FORMAT = (
    "The value for the $extensions configuration property has an unexpected format or type."
)


def _missing_extension_message(fqcn: str) -> str:
    return (
        f"The '{fqcn}' class referenced in the $extensions configuration property "
        "doesn't exist."
    )


def _is_class_reference(value: object) -> bool:
    """Class references (``Foo::class``) are stored unquoted."""
    if not isinstance(value, str) or not value:
        return False
    return value[0] not in "'\"" and value.lower() not in {"null", "true", "false"}


def resolve_extensions(
    table: SymbolTable, class_symbol: ClassSymbol
) -> tuple[dict[str, ClassSymbol], list[str]]:
    """Get all extensions explicitly applied to a class.

    Returns:
        The extensions indexed by name, and a message for each entry in the
        ``$extensions`` config which couldn't be resolved.
    """
    extensions_property = class_symbol.own_properties().get(EXTENSIONS_CONFIG)
    if extensions_property is None:
        return {}, []

    raw_value = extensions_property.default
    if not isinstance(raw_value, dict) or not raw_value:
        return {}, []

    extensions: dict[str, ClassSymbol] = {}
    issues: list[str] = []
    for value in raw_value.values():
        if not _is_class_reference(value):
            issues.append(MESSAGE_UNEXPECTED_FORMAT)
            continue
        fqcn = value.lstrip("\\")
        extension = table.get_class(fqcn)
        if extension is None or not extension.exists():
            issues.append(_missing_extension_message(fqcn))
            continue
        extensions[fqcn] = extension
    return extensions, issues


def methods_with_extensions(
    table: SymbolTable,
    class_symbol: ClassSymbol,
    extensions: dict[str, ClassSymbol],
) -> dict[str, MethodSymbol]:
    """Methods of a class, plus public methods its extensions add to it."""
    methods = table.methods(class_symbol, inherited=True)
    for extension in extensions.values():
        for name, method in table.methods(extension, inherited=True).items():
            if not method.is_public or name in methods:
                continue
            contributed = method.model_copy(deep=True)
            contributed.bind(class_symbol.name, class_symbol.file)
            contributed.extension = extension.name
            methods[name] = contributed
    return methods


def properties_with_extensions(
    table: SymbolTable,
    class_symbol: ClassSymbol,
    extensions: dict[str, ClassSymbol],
) -> dict[str, PropertySymbol]:
    """Properties of a class, plus configuration its extensions add to it."""
    properties = table.properties(class_symbol, inherited=True)
    for extension in extensions.values():
        for name, prop in table.properties(extension, inherited=True).items():
            if not prop.is_config or name in properties:
                continue
            contributed = prop.model_copy(deep=True)
            contributed.class_name = class_symbol.name
            contributed.file = class_symbol.file
            contributed.extension = extension.name
            properties[name] = contributed
    return properties


__all__ = [
    "MESSAGE_UNEXPECTED_FORMAT",
    "methods_with_extensions",
    "properties_with_extensions",
    "resolve_extensions",
]
