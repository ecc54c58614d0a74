"""API type classification and stable identifiers for symbols."""

from __future__ import annotations

from enum import Enum

from errors import UnknownApiTypeError
from symbols.models import (
    CATEGORY_CLASS,
    CATEGORY_INTERFACE,
    CATEGORY_TRAIT,
    ClassSymbol,
    ConstantSymbol,
    FunctionSymbol,
    MethodSymbol,
    ParameterSymbol,
    PropertySymbol,
    Symbol,
)


class ApiType(str, Enum):
    """Closed set of API types a symbol can be classified as."""

    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    FUNCTION = "function"
    METHOD = "method"
    PROPERTY = "property"
    CONFIG = "config"
    CONST = "const"
    PARAM = "param"

    @property
    def store_key(self) -> str:
        """Symbol-kind key used when bucketing changes and actions."""
        if self in (ApiType.INTERFACE, ApiType.TRAIT):
            return ApiType.CLASS.value
        return self.value

    @property
    def label(self) -> str:
        """Human-readable API type, as stored in each record's ``apiType``."""
        if self is ApiType.CONST:
            return "constant"
        if self is ApiType.PARAM:
            return "parameter"
        return self.value

    @property
    def is_deprecatable(self) -> bool:
        # Parameters can't carry deprecation annotations.
        return self is not ApiType.PARAM

    @property
    def hint_change_kind(self) -> str | None:
        if self in (ApiType.FUNCTION, ApiType.METHOD):
            return "returnType"
        if self in (ApiType.PROPERTY, ApiType.CONFIG, ApiType.CONST):
            return "type"
        return None


_CATEGORY_TYPES = {
    CATEGORY_CLASS: ApiType.CLASS,
    CATEGORY_INTERFACE: ApiType.INTERFACE,
    CATEGORY_TRAIT: ApiType.TRAIT,
}


def category_api_type(category_id: int) -> ApiType:
    try:
        return _CATEGORY_TYPES[category_id]
    except KeyError as exc:
        msg = f"Unexpected class category: {category_id}"
        raise UnknownApiTypeError(msg) from exc


def api_type_of(symbol: Symbol) -> ApiType:
    """Classify a symbol.

    Raises:
        UnknownApiTypeError: If the symbol is not one of the known symbol types.
    """
    if isinstance(symbol, ClassSymbol):
        return category_api_type(symbol.category_id)
    if isinstance(symbol, ParameterSymbol):
        return ApiType.PARAM
    if isinstance(symbol, MethodSymbol):
        return ApiType.METHOD
    if isinstance(symbol, FunctionSymbol):
        return ApiType.FUNCTION
    if isinstance(symbol, PropertySymbol):
        if symbol.is_config or symbol.extension is not None:
            return ApiType.CONFIG
        return ApiType.PROPERTY
    if isinstance(symbol, ConstantSymbol):
        return ApiType.CONST
    msg = f"Unexpected symbol type: {type(symbol).__name__}"
    raise UnknownApiTypeError(msg, {"name": symbol.name})


def symbol_ref(symbol: Symbol) -> str:
    """Get a unique, human-readable reference for the API a symbol represents.

    Examples: ``Foo\\Bar``, ``Foo\\Bar::baz()``, ``Foo\\Bar->prop``,
    ``Foo\\Bar::CONST``, ``func()``, ``func($arg)``, ``Foo\\Bar::baz($arg)``.
    """
    api_type = api_type_of(symbol)
    name = symbol.name

    if api_type.store_key == ApiType.CLASS.value:
        return name
    if api_type is ApiType.FUNCTION:
        return f"{name}()"

    if isinstance(symbol, ParameterSymbol):
        if symbol.function:
            return f"{symbol.function}(${name})"
        if symbol.method:
            return f"{symbol.class_name or ''}::{symbol.method}(${name})"
        return f"${name}"

    if api_type is ApiType.METHOD:
        base = f"::{name}()"
    elif api_type in (ApiType.PROPERTY, ApiType.CONFIG):
        base = f"->{name}"
    else:
        base = f"::{name}"

    class_name = getattr(symbol, "class_name", None)
    if not class_name:
        return base
    return f"{class_name}{base}"


__all__ = ["ApiType", "api_type_of", "category_api_type", "symbol_ref"]
