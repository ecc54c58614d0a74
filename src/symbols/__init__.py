"""Symbol model and per-version symbol tables."""

from symbols.api_types import ApiType, api_type_of, symbol_ref
from symbols.models import (
    ClassSymbol,
    ConstantSymbol,
    FunctionSymbol,
    HintPart,
    MethodSymbol,
    ParameterSymbol,
    PropertySymbol,
    Snapshot,
    Symbol,
)
from symbols.provider import Version, VersionedProject, load_project, load_snapshot
from symbols.table import SymbolTable

__all__ = [
    "ApiType",
    "ClassSymbol",
    "ConstantSymbol",
    "FunctionSymbol",
    "HintPart",
    "MethodSymbol",
    "ParameterSymbol",
    "PropertySymbol",
    "Snapshot",
    "Symbol",
    "SymbolTable",
    "Version",
    "VersionedProject",
    "api_type_of",
    "load_project",
    "load_snapshot",
    "symbol_ref",
]
