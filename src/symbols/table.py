"""Indexed, read-only view over the symbol snapshot of one version."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from logging_config import get_logger

if TYPE_CHECKING:
    from symbols.models import (
        ClassSymbol,
        ConstantSymbol,
        FunctionSymbol,
        MethodSymbol,
        PropertySymbol,
        Snapshot,
    )

logger = get_logger(__name__)

MemberKind = Literal["constants", "properties", "methods"]


class SymbolTable:
    """Lookups, hierarchy resolution, and member inheritance for one version.

    Each table wraps its own snapshot, so tables for different versions never
    share symbol objects and can be used side by side.
    """

    def __init__(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self._classes: dict[str, ClassSymbol] = {}
        for class_symbol in snapshot.classes:
            self._classes[class_symbol.name] = class_symbol

        self._functions: dict[str, FunctionSymbol] = {}
        for function in snapshot.functions:
            if function.name in self._functions:
                logger.warning(
                    "Duplicate global function %s in '%s' version, keeping the last one",
                    function.name,
                    snapshot.version,
                )
            self._functions[function.name] = function

    @property
    def version(self) -> str:
        return self.snapshot.version

    def functions(self) -> dict[str, FunctionSymbol]:
        """Global functions indexed by name."""
        return dict(self._functions)

    def classes(self) -> dict[str, ClassSymbol]:
        """Project classes and traits indexed by fully-qualified name."""
        return {
            name: class_symbol
            for name, class_symbol in self._classes.items()
            if class_symbol.is_project and not class_symbol.is_interface
        }

    def interfaces(self) -> dict[str, ClassSymbol]:
        """Project interfaces indexed by fully-qualified name."""
        return {
            name: class_symbol
            for name, class_symbol in self._classes.items()
            if class_symbol.is_project and class_symbol.is_interface
        }

    def get_class(self, name: str) -> ClassSymbol | None:
        """Any class-like known in this version, including dependencies."""
        return self._classes.get(name)

    def get_function(self, name: str) -> FunctionSymbol | None:
        return self._functions.get(name)

    def parent_of(self, class_symbol: ClassSymbol) -> ClassSymbol | None:
        if class_symbol.parent is None:
            return None
        return self._classes.get(class_symbol.parent)

    def ancestors(self, class_symbol: ClassSymbol) -> list[ClassSymbol]:
        """Parent classes, nearest first. Unknown parents end the chain."""
        chain: list[ClassSymbol] = []
        seen = {class_symbol.name}
        current = self.parent_of(class_symbol)
        while current is not None and current.name not in seen:
            chain.append(current)
            seen.add(current.name)
            current = self.parent_of(current)
        return chain

    def is_a(self, class_symbol: ClassSymbol | None, class_name: str) -> bool:
        """Check whether a class is, or extends, the named class."""
        if class_symbol is None:
            return False
        if class_symbol.name == class_name:
            return True
        return any(parent.name == class_name for parent in self.ancestors(class_symbol))

    def constants(
        self, class_symbol: ClassSymbol, inherited: bool = False
    ) -> dict[str, ConstantSymbol]:
        return self._members(class_symbol, "constants", inherited, set())  # type: ignore[return-value]

    def properties(
        self, class_symbol: ClassSymbol, inherited: bool = False
    ) -> dict[str, PropertySymbol]:
        return self._members(class_symbol, "properties", inherited, set())  # type: ignore[return-value]

    def methods(
        self, class_symbol: ClassSymbol, inherited: bool = False
    ) -> dict[str, MethodSymbol]:
        return self._members(class_symbol, "methods", inherited, set())  # type: ignore[return-value]

    def parent_member(
        self, class_symbol: ClassSymbol, kind: MemberKind, name: str
    ) -> object | None:
        """Find a member with the same name on any parent class."""
        parent = self.parent_of(class_symbol)
        if parent is None:
            return None
        return self._members(parent, kind, True, {class_symbol.name}).get(name)

    def _members(
        self,
        class_symbol: ClassSymbol,
        kind: MemberKind,
        inherited: bool,
        seen: set[str],
    ) -> dict[str, object]:
        own: dict[str, object] = {
            member.name: member for member in getattr(class_symbol, kind)
        }
        if not inherited:
            return own

        seen = seen | {class_symbol.name}
        members: dict[str, object] = {}

        parent = self.parent_of(class_symbol)
        if parent is not None and parent.name not in seen:
            members.update(self._members(parent, kind, True, seen))

        # Interface declarations never replace an implementation.
        if kind != "properties":
            for interface_name in class_symbol.interfaces:
                interface = self._classes.get(interface_name)
                if interface is None or interface.name in seen:
                    continue
                for name, member in self._members(interface, kind, True, seen).items():
                    members.setdefault(name, member)

        for trait_name in class_symbol.traits:
            trait = self._classes.get(trait_name)
            if trait is None or trait.name in seen:
                continue
            members.update(self._members(trait, kind, True, seen))

        members.update(own)
        return members


__all__ = ["MemberKind", "SymbolTable"]
