"""Symbol models for one parsed version of a codebase.

These models describe the symbol table produced by the upstream parse stage:
class-likes, their constants, properties and methods, global functions and
parameters. Owner back-references (declaring class, owning function or
method, file) are derived when a snapshot is validated, so snapshot files only
need to describe each symbol once, where it is declared.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from contract.files import SNAPSHOT_SCHEMA_VERSION

# Schema version constant
SCHEMA_VERSION = SNAPSHOT_SCHEMA_VERSION

Visibility = Literal["public", "protected", "private", ""]

CATEGORY_CLASS = 1
CATEGORY_INTERFACE = 2
CATEGORY_TRAIT = 3

CategoryId = Literal[1, 2, 3]


def normalize_default(value: Any) -> Any:
    """Normalize an evaluated default value so arrays are always mappings.

    Lists become mappings keyed by their position ("0", "1", ...), and keys of
    mappings are always strings. Scalars are kept as-is.
    """
    if isinstance(value, list):
        return {str(index): normalize_default(item) for index, item in enumerate(value)}
    if isinstance(value, dict):
        return {str(key): normalize_default(item) for key, item in value.items()}
    return value


class HintPart(BaseModel):
    """One named part of a (possibly union or intersection) type hint."""

    model_config = ConfigDict(extra="forbid")

    name: str
    fqcn: str | None = Field(
        default=None,
        description="Fully-qualified class name when the part references a class",
    )

    @property
    def canonical(self) -> str:
        return self.fqcn or self.name


class Symbol(BaseModel):
    """Attributes shared by every symbol kind."""

    model_config = ConfigDict(extra="forbid")

    name: str
    file: str | None = None
    line: int | None = None
    is_internal: bool = False
    is_deprecated: bool = False
    deprecations: list[list[str]] = Field(
        default_factory=list,
        description="Deprecation notices, each split into parts (part 0 is the version)",
    )
    is_final: bool = False
    is_abstract: bool = False
    is_static: bool = False
    visibility: Visibility = ""
    hint: list[HintPart] = Field(default_factory=list)
    is_intersection_type: bool = False

    @property
    def is_public(self) -> bool:
        return self.visibility == "public"

    @property
    def is_protected(self) -> bool:
        return self.visibility == "protected"

    @property
    def is_private(self) -> bool:
        return self.visibility == "private"

    @property
    def hint_separator(self) -> str:
        return "&" if self.is_intersection_type else "|"

    def hint_string(self) -> str:
        """Type hint with class references resolved to fully-qualified names."""
        return self.hint_separator.join(part.canonical for part in self.hint)

    def hint_as_written(self) -> str:
        """Type hint as it was written in the source."""
        return self.hint_separator.join(part.name for part in self.hint)

    def exists(self) -> bool:
        return self.file is not None


class ParameterSymbol(Symbol):
    """A parameter of a global function or a method."""

    variadic: bool = False
    is_by_ref: bool = False
    default: str | None = Field(
        default=None,
        description="Raw default value as written, including quotes",
    )
    function: str | None = None
    method: str | None = None
    class_name: str | None = None


class _Callable(Symbol):
    is_by_ref: bool = False
    parameters: list[ParameterSymbol] = Field(default_factory=list)


class FunctionSymbol(_Callable):
    """A globally-scoped function."""

    @model_validator(mode="after")
    def _bind_parameters(self) -> FunctionSymbol:
        for param in self.parameters:
            param.function = self.name
            param.method = None
            param.class_name = None
            param.file = self.file
        return self


class MethodSymbol(_Callable):
    """A method declared on a class, interface, or trait."""

    class_name: str | None = None
    extension: str | None = Field(
        default=None,
        description="Extension class this method was contributed by, if any",
    )

    def bind(self, class_name: str, file: str | None) -> None:
        self.class_name = class_name
        self.file = file
        for param in self.parameters:
            param.function = None
            param.method = self.name
            param.class_name = class_name
            param.file = file


class PropertySymbol(Symbol):
    """A property declared on a class-like."""

    is_read_only: bool = False
    default: Any = None
    class_name: str | None = None
    extension: str | None = Field(
        default=None,
        description="Extension class this config was contributed by, if any",
    )

    @field_validator("default", mode="before")
    @classmethod
    def _normalize_default(cls, v: Any) -> Any:
        return normalize_default(v)

    @property
    def is_config(self) -> bool:
        """Private static properties are configuration, not regular properties."""
        return self.is_private and self.is_static


class ConstantSymbol(Symbol):
    """A class constant."""

    class_name: str | None = None


class ClassSymbol(Symbol):
    """A class, interface, or trait (distinguished by ``category_id``)."""

    category_id: CategoryId = CATEGORY_CLASS
    parent: str | None = None
    interfaces: list[str] = Field(default_factory=list)
    traits: list[str] = Field(default_factory=list)
    is_read_only: bool = False
    is_project: bool = Field(
        default=True,
        description="False for dependency classes only needed to resolve hierarchies",
    )
    constants: list[ConstantSymbol] = Field(default_factory=list)
    properties: list[PropertySymbol] = Field(default_factory=list)
    methods: list[MethodSymbol] = Field(default_factory=list)

    @model_validator(mode="after")
    def _bind_members(self) -> ClassSymbol:
        for const in self.constants:
            const.class_name = self.name
            const.file = self.file
        for prop in self.properties:
            prop.class_name = self.name
            prop.file = self.file
        for method in self.methods:
            method.bind(self.name, self.file)
        return self

    @property
    def is_interface(self) -> bool:
        return self.category_id == CATEGORY_INTERFACE

    def own_constants(self) -> dict[str, ConstantSymbol]:
        return {const.name: const for const in self.constants}

    def own_properties(self) -> dict[str, PropertySymbol]:
        return {prop.name: prop for prop in self.properties}

    def own_methods(self) -> dict[str, MethodSymbol]:
        return {method.name: method for method in self.methods}


class Snapshot(BaseModel):
    """The full symbol table for one version of the codebase."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = Field(default=SCHEMA_VERSION)
    version: Literal["from", "to"]
    functions: list[FunctionSymbol] = Field(default_factory=list)
    classes: list[ClassSymbol] = Field(default_factory=list)


__all__ = [
    "CATEGORY_CLASS",
    "CATEGORY_INTERFACE",
    "CATEGORY_TRAIT",
    "SCHEMA_VERSION",
    "CategoryId",
    "ClassSymbol",
    "ConstantSymbol",
    "FunctionSymbol",
    "HintPart",
    "MethodSymbol",
    "ParameterSymbol",
    "PropertySymbol",
    "Snapshot",
    "Symbol",
    "Visibility",
    "normalize_default",
]
