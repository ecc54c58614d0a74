"""Compares the API of two versions of a codebase to find breaking changes."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from compare.extensions import (
    methods_with_extensions,
    properties_with_extensions,
    resolve_extensions,
)
from compare.relations import array_config_value, check_db_fields_and_relations
from compare.store import (
    ACTION_DEPRECATE,
    ACTION_FIX_DEPRECATION,
    ACTION_REMOVE,
    ActionStore,
    ChangeStore,
)
from compare.values import (
    defaults_differ,
    display_default,
    param_hint_changed,
)
from contract.records import ApiRecord
from errors import ModuleResolutionError
from logging_config import get_logger
from rules.config import DeprecheckConfig
from rules.relations import RELATION_RULES, is_relation_config
from symbols.api_types import ApiType, api_type_of, symbol_ref
from symbols.models import MethodSymbol
from utils import file_to_module

if TYPE_CHECKING:
    from symbols.models import (
        ClassSymbol,
        ConstantSymbol,
        FunctionSymbol,
        ParameterSymbol,
        PropertySymbol,
        Symbol,
    )
    from symbols.provider import VersionedProject
    from symbols.table import MemberKind, SymbolTable

logger = get_logger(__name__)

MESSAGE_REMOVED_NOT_DEPRECATED = "This API was removed, but hasn't been deprecated."
MESSAGE_INTERNAL_NOT_DEPRECATED = "This API was made @internal, but hasn't been deprecated."
MESSAGE_DEPRECATED_NOT_REMOVED = "This API is deprecated, but hasn't been removed."
MESSAGE_MISSING_DEPRECATION_MESSAGE = "The deprecation annotation is missing a message."
MESSAGE_MULTIPLE_DEPRECATIONS = "There are multiple deprecation notices for this API."
MESSAGE_MALFORMED_VERSION = (
    "The version number for this deprecation notice is missing or malformed. "
    'Should be in the form "1.2.0".'
)

_VERSION_NUMBER = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+$")


class BreakingChangesComparer:
    """Compares code between versions to find breaking API changes.

    Results accumulate across calls to :meth:`compare`, so use a new comparer
    for each comparison.
    """

    def __init__(self, config: DeprecheckConfig | None = None) -> None:
        self.config = config or DeprecheckConfig()
        self.changes = ChangeStore()
        self.actions = ActionStore()
        self._from: SymbolTable | None = None
        self._to: SymbolTable | None = None

    def get_breaking_changes(self) -> dict[str, Any]:
        """Get the list of all API breaking changes that were found."""
        return self.changes.to_dict()

    def get_actions_to_take(self) -> dict[str, Any]:
        """Get any actions developers need to take to improve the fidelity of the comparison."""
        return self.actions.to_dict()

    def compare(self, project: VersionedProject) -> None:
        """Compare the API in two versions of the same project and find API breaking changes."""
        self._from = project.from_table
        self._to = project.to_table

        functions_to = self._to.functions()
        for name, function in self._from.functions().items():
            self._check_global_function(name, function, functions_to.get(name))

        # Traits are class-likes too, so they're compared the same way as classes.
        for fqcn, class_symbol in self._from.classes().items():
            self._check_class(fqcn, class_symbol, self._to.get_class(fqcn))

        for fqcn, interface in self._from.interfaces().items():
            self._check_class(fqcn, interface, self._to.get_class(fqcn))

        logger.info(
            "Found %d breaking changes and %d actions to take",
            len(self.changes),
            len(self.actions),
        )

    @property
    def _tables(self) -> tuple[SymbolTable, SymbolTable]:
        if self._from is None or self._to is None:
            msg = "compare() must be called before checking individual symbols"
            raise RuntimeError(msg)
        return self._from, self._to

    def _check_global_function(
        self,
        name: str,
        function_from: FunctionSymbol,
        function_to: FunctionSymbol | None,
    ) -> None:
        """Check for API breaking changes in a globally-scoped function.

        Checks for removal, becoming internal, return type, and returning by
        reference, then checks each parameter.
        """
        logger.debug("Checking globally-scoped function %s", name)
        module = self._module_for(function_from, function_to)
        data_from = ApiRecord(
            name=name,
            api_type=ApiType.FUNCTION.label,
            file=function_from.file,
            line=function_from.line,
        )
        data_to = ApiRecord(
            name=name,
            api_type=ApiType.FUNCTION.label,
            file=function_to.file if function_to else None,
            line=function_to.line if function_to else None,
        )

        is_missing = self._check_for_missing_api(
            name, function_from, function_to, data_from, data_to, module
        )
        if is_missing or function_to is None:
            return

        self._check_for_signature_changes(function_from, function_to, data_to, module)

        if function_from.is_by_ref != function_to.is_by_ref:
            self.changes.flag_changed(
                "returnByRef",
                module,
                ApiType.FUNCTION.store_key,
                symbol_ref(function_from),
                data_to,
                function_to.is_by_ref,
            )

        self._check_parameters(function_from.parameters, function_to.parameters, module)

    def _check_class(
        self,
        fqcn: str,
        class_from: ClassSymbol,
        class_to: ClassSymbol | None,
    ) -> None:
        """Check for API breaking changes in a class, interface, or trait.

        Checks for removal, becoming internal, changing category (e.g. class to
        interface), and becoming abstract, final, or readonly. Constants,
        properties, methods, and database/relation config are then checked.
        """
        table_from, table_to = self._tables
        api_type_from = api_type_of(class_from)
        api_type_to = api_type_of(class_to) if class_to is not None else None
        logger.debug("Checking %s %s", api_type_from.value, fqcn)

        module = self._module_for(class_from, class_to)
        data_from = ApiRecord(
            name=fqcn,
            api_type=api_type_from.label,
            file=class_from.file,
            line=class_from.line,
        )
        data_to = ApiRecord(
            name=fqcn,
            api_type=(api_type_to or api_type_from).label,
            file=class_to.file if class_to else None,
            line=class_to.line if class_to else None,
        )

        extensions_from = self._extensions(table_from, class_from, data_from, module)
        extensions_to = (
            self._extensions(table_to, class_to, data_to, module) if class_to else {}
        )

        is_missing = self._check_for_missing_api(
            fqcn, class_from, class_to, data_from, data_to, module
        )
        if is_missing or class_to is None or api_type_to is None:
            return

        self._check_for_signature_changes(class_from, class_to, data_to, module)

        store_key = api_type_from.store_key
        if class_from.category_id != class_to.category_id:
            self.changes.value_changed(
                "type", module, store_key, fqcn, data_to, api_type_from.value, api_type_to.value
            )

        if class_from.is_read_only != class_to.is_read_only:
            self.changes.flag_changed(
                "readonly", module, store_key, fqcn, data_to, class_to.is_read_only
            )

        self._check_constants(
            fqcn,
            table_from.constants(class_from, inherited=True),
            table_to.constants(class_to, inherited=True),
            module,
        )
        self._check_properties(
            fqcn,
            properties_with_extensions(table_from, class_from, extensions_from),
            properties_with_extensions(table_to, class_to, extensions_to),
            module,
        )
        self._check_methods(
            fqcn,
            methods_with_extensions(table_from, class_from, extensions_from),
            methods_with_extensions(table_to, class_to, extensions_to),
            module,
        )

        # Models and extensions can define database fields and relations
        if self._has_relation_config(table_from, class_from):
            configs_from = {
                rule.config_name: array_config_value(
                    table_from, class_from, rule.config_name, extensions_from
                )
                for rule in RELATION_RULES
            }
            configs_to = {
                rule.config_name: array_config_value(
                    table_to, class_to, rule.config_name, extensions_to
                )
                for rule in RELATION_RULES
            }
            check_db_fields_and_relations(
                self.changes, fqcn, configs_from, configs_to, module
            )

    def _extensions(
        self,
        table: SymbolTable,
        class_symbol: ClassSymbol,
        data: ApiRecord,
        module: str,
    ) -> dict[str, ClassSymbol]:
        extensions, issues = resolve_extensions(table, class_symbol)
        for message in issues:
            self.actions.add(
                ACTION_DEPRECATE,
                module,
                ApiType.CLASS.store_key,
                symbol_ref(class_symbol),
                data,
                message,
            )
        return extensions

    def _is_declared_on(
        self, member_class: str | None, class_name: str, kind: MemberKind, name: str
    ) -> bool:
        """Whether a member should be compared as part of this class.

        Members inherited from a parent or pulled in from a trait are compared
        on the class that declares them. Members which override a parent
        member are only compared on the parent.
        """
        if member_class != class_name:
            return False
        table_from, _ = self._tables
        owner = table_from.get_class(class_name)
        if owner is None:
            return True
        return table_from.parent_member(owner, kind, name) is None

    def _check_constants(
        self,
        class_name: str,
        consts_from: dict[str, ConstantSymbol],
        consts_to: dict[str, ConstantSymbol],
        module: str,
    ) -> None:
        for name, const in consts_from.items():
            if not self._is_declared_on(const.class_name, class_name, "constants", name):
                continue
            self._check_constant(name, const, consts_to.get(name), module)

    def _check_constant(
        self,
        name: str,
        const_from: ConstantSymbol,
        const_to: ConstantSymbol | None,
        module: str,
    ) -> None:
        logger.debug("Checking constant %s", name)
        data_from = ApiRecord(
            name=name,
            api_type=ApiType.CONST.label,
            file=const_from.file,
            line=const_from.line,
            class_name=const_from.class_name,
        )
        # The "from" class is what the changelog refers to, even if the API
        # moved into a trait in the new version.
        data_to = ApiRecord(
            name=name,
            api_type=ApiType.CONST.label,
            file=const_to.file if const_to else None,
            line=const_to.line if const_to else None,
            class_name=const_from.class_name,
        )

        is_missing = self._check_for_missing_api(
            name, const_from, const_to, data_from, data_to, module
        )
        if is_missing or const_to is None:
            return

        self._check_for_signature_changes(const_from, const_to, data_to, module)

    def _check_properties(
        self,
        class_name: str,
        properties_from: dict[str, PropertySymbol],
        properties_to: dict[str, PropertySymbol],
        module: str,
    ) -> None:
        for name, prop in properties_from.items():
            if not self._is_declared_on(prop.class_name, class_name, "properties", name):
                continue
            self._check_property(name, prop, properties_to.get(name), module)

    def _check_property(
        self,
        name: str,
        property_from: PropertySymbol,
        property_to: PropertySymbol | None,
        module: str,
    ) -> None:
        logger.debug("Checking property %s", name)
        table_from, _ = self._tables
        api_type = api_type_of(property_from)
        data_from = ApiRecord(
            name=name,
            api_type=api_type.label,
            file=property_from.file,
            line=property_from.line,
            class_name=property_from.class_name,
        )
        data_to = ApiRecord(
            name=name,
            api_type=api_type_of(property_to).label if property_to else api_type.label,
            file=property_to.file if property_to else None,
            line=property_to.line if property_to else None,
            class_name=property_from.class_name,
        )

        is_missing = self._check_for_missing_api(
            name, property_from, property_to, data_from, data_to, module
        )
        if is_missing or property_to is None:
            return

        self._check_for_signature_changes(property_from, property_to, data_to, module)

        ref = symbol_ref(property_from)
        if property_from.is_read_only != property_to.is_read_only:
            self.changes.flag_changed(
                "readonly", module, api_type.store_key, ref, data_to, property_to.is_read_only
            )

        # Database fields and relations are checked in more detail separately.
        class_from = (
            table_from.get_class(property_from.class_name)
            if property_from.class_name
            else None
        )
        if is_relation_config(name) and self._has_relation_config(table_from, class_from):
            return

        if api_type is not ApiType.CONFIG:
            return

        value_from = property_from.default
        value_to = property_to.default
        if not defaults_differ(value_from, value_to):
            return
        if isinstance(value_from, dict) and isinstance(value_to, dict):
            self.changes.marked("default-array", module, api_type.store_key, ref, data_to)
            return
        self.changes.value_changed(
            "default",
            module,
            api_type.store_key,
            ref,
            data_to,
            display_default(value_from),
            display_default(value_to),
        )

    def _check_methods(
        self,
        class_name: str,
        methods_from: dict[str, MethodSymbol],
        methods_to: dict[str, MethodSymbol],
        module: str,
    ) -> None:
        for name, method in methods_from.items():
            if not self._is_declared_on(method.class_name, class_name, "methods", name):
                continue
            self._check_method(name, method, methods_to.get(name), module)

    def _check_method(
        self,
        name: str,
        method_from: MethodSymbol,
        method_to: MethodSymbol | None,
        module: str,
    ) -> None:
        """Check for API breaking changes in a method.

        On top of the shared checks this looks at whether the method is static
        and whether it returns by reference, then checks each parameter.
        """
        logger.debug("Checking method %s", name)
        data_from = ApiRecord(
            name=name,
            api_type=ApiType.METHOD.label,
            file=method_from.file,
            line=method_from.line,
            class_name=method_from.class_name,
        )
        data_to = ApiRecord(
            name=name,
            api_type=ApiType.METHOD.label,
            file=method_to.file if method_to else None,
            line=method_to.line if method_to else None,
            class_name=method_from.class_name,
        )

        is_missing = self._check_for_missing_api(
            name, method_from, method_to, data_from, data_to, module
        )
        if is_missing or method_to is None:
            return

        self._check_for_signature_changes(method_from, method_to, data_to, module)

        ref = symbol_ref(method_from)
        store_key = ApiType.METHOD.store_key
        if method_from.is_static != method_to.is_static:
            self.changes.flag_changed(
                "static", module, store_key, ref, data_to, method_to.is_static
            )

        if method_from.is_by_ref != method_to.is_by_ref:
            self.changes.flag_changed(
                "returnByRef", module, store_key, ref, data_to, method_to.is_by_ref
            )

        self._check_parameters(method_from.parameters, method_to.parameters, module)

    def _check_parameters(
        self,
        parameters_from: list[ParameterSymbol],
        parameters_to: list[ParameterSymbol],
        module: str,
    ) -> None:
        """Check all parameters of a function or method.

        A parameter which no longer exists by name is assumed to have been
        renamed if there's a parameter in the same position in the new version.
        """
        to_by_name = {param.name: param for param in parameters_to}
        from_names = {param.name for param in parameters_from}
        renamed_targets: set[str] = set()

        for position, param in enumerate(parameters_from):
            param_to = to_by_name.get(param.name)
            if param_to is None and position < len(parameters_to):
                param_to = parameters_to[position]
                renamed_targets.add(param_to.name)
            self._check_parameter(param.name, param, param_to, module)

        # New params are also breaking API changes
        for new_param in parameters_to:
            if new_param.name in from_names or new_param.name in renamed_targets:
                continue
            data = ApiRecord(
                name=new_param.name,
                api_type=ApiType.PARAM.label,
                function=new_param.function,
                method=new_param.method,
                class_name=new_param.class_name,
            )
            self.changes.new_param(
                module,
                symbol_ref(new_param),
                data,
                hint=new_param.hint_string(),
                hint_orig=new_param.hint_as_written(),
            )

    def _check_parameter(
        self,
        name: str,
        param_from: ParameterSymbol,
        param_to: ParameterSymbol | None,
        module: str,
    ) -> None:
        """Check for API breaking changes in a parameter.

        Checks for removal, type, name, variadic, pass by reference, and
        default value changes.
        """
        logger.debug("Checking parameter %s", name)
        data_from = ApiRecord(
            name=name,
            api_type=ApiType.PARAM.label,
            file=param_from.file,
            line=param_from.line,
            function=param_from.function,
            method=param_from.method,
            class_name=param_from.class_name,
        )
        data_to = ApiRecord(
            name=name,
            api_type=ApiType.PARAM.label,
            file=param_to.file if param_to else None,
            line=param_to.line if param_to else None,
            function=param_to.function if param_to else None,
            method=param_to.method if param_to else None,
            class_name=param_from.class_name,
        )

        is_missing = self._check_for_missing_api(
            name, param_from, param_to, data_from, data_to, module
        )
        if is_missing or param_to is None:
            return

        ref = symbol_ref(param_to)
        store_key = ApiType.PARAM.store_key

        if param_hint_changed(param_from, param_to):
            self.changes.hint_changed(
                "type",
                module,
                store_key,
                ref,
                data_to,
                from_hint=param_from.hint_string(),
                to_hint=param_to.hint_string(),
                from_orig=param_from.hint_as_written(),
                to_orig=param_to.hint_as_written(),
            )

        if param_to.name != name:
            self.changes.value_changed(
                "renamed", module, store_key, ref, data_to, name, param_to.name
            )

        if param_from.variadic != param_to.variadic:
            self.changes.flag_changed(
                "variadic", module, store_key, ref, data_to, param_to.variadic
            )

        if param_from.is_by_ref != param_to.is_by_ref:
            self.changes.flag_changed(
                "passByRef", module, store_key, ref, data_to, param_to.is_by_ref
            )

        if defaults_differ(param_from.default, param_to.default):
            self.changes.value_changed(
                "default",
                module,
                store_key,
                ref,
                data_to,
                param_from.default,
                param_to.default,
            )

    def _check_for_missing_api(
        self,
        name: str,
        symbol_from: Symbol,
        symbol_to: Symbol | None,
        data_from: ApiRecord,
        data_to: ApiRecord,
        module: str,
    ) -> bool:
        """Check whether API was removed, or became internal in the new version.

        Also records actions that need to be taken, e.g. deprecating API in the
        old version before removing it.

        Returns:
            True if further comparisons should be skipped.
        """
        # API contributed by an extension is checked against the extension itself.
        if getattr(symbol_from, "extension", None) is not None:
            return True

        # Internal API isn't part of the public API surface in the first place.
        if symbol_from.is_internal:
            return True

        api_type = api_type_of(symbol_from)

        # Private methods and constants were never reachable from outside the class.
        if symbol_from.is_private and api_type in (ApiType.METHOD, ApiType.CONST):
            return True

        store_key = api_type.store_key
        ref = symbol_ref(symbol_from)

        if symbol_to is None or not symbol_to.exists():
            # Constructors without params don't need any action
            if (
                isinstance(symbol_from, MethodSymbol)
                and name == "__construct"
                and not symbol_from.parameters
            ):
                return True

            if api_type.is_deprecatable and not symbol_from.is_deprecated:
                self.actions.add(
                    ACTION_DEPRECATE,
                    module,
                    store_key,
                    ref,
                    data_from,
                    MESSAGE_REMOVED_NOT_DEPRECATED,
                )
            self.changes.removed(
                module,
                store_key,
                ref,
                data_from,
                self._deprecation_message(symbol_from, data_from, module),
            )
            return True

        if symbol_to.is_internal:
            if api_type.is_deprecatable and not symbol_from.is_deprecated:
                self.actions.add(
                    ACTION_DEPRECATE,
                    module,
                    store_key,
                    ref,
                    data_from,
                    MESSAGE_INTERNAL_NOT_DEPRECATED,
                )
            message = self._deprecation_message(symbol_from, data_from, module)
            if api_type is ApiType.CONFIG:
                # @internal config is never picked up as config, so it's gone.
                self.changes.removed(module, store_key, ref, data_from, message)
            else:
                self.changes.internal(module, store_key, ref, data_from, message)
            return True

        # Deprecated API which should be removed now. API which stopped being
        # deprecated, or is only deprecated in the new version, is ignored.
        if api_type.is_deprecatable and symbol_from.is_deprecated and symbol_to.is_deprecated:
            self.actions.add(
                ACTION_REMOVE,
                module,
                store_key,
                ref,
                data_to,
                MESSAGE_DEPRECATED_NOT_REMOVED,
            )

        return False

    def _check_for_signature_changes(
        self,
        symbol_from: Symbol,
        symbol_to: Symbol,
        data: ApiRecord,
        module: str,
    ) -> None:
        """Check for changes to the type, visibility, finality, or abstractness of API."""
        api_type = api_type_of(symbol_from)
        store_key = api_type.store_key
        ref = symbol_ref(symbol_from)

        hint_kind = api_type.hint_change_kind
        if hint_kind is not None and symbol_from.hint_string() != symbol_to.hint_string():
            self.changes.hint_changed(
                hint_kind,  # type: ignore[arg-type]
                module,
                store_key,
                ref,
                data,
                from_hint=symbol_from.hint_string(),
                to_hint=symbol_to.hint_string(),
                from_orig=symbol_from.hint_as_written(),
                to_orig=symbol_to.hint_as_written(),
            )

        visibility_from = symbol_from.visibility
        visibility_to = symbol_to.visibility
        # No explicit visibility is the same as public.
        if visibility_from != visibility_to and {visibility_from, visibility_to} != {"", "public"}:
            self.changes.value_changed(
                "visibility", module, store_key, ref, data, visibility_from, visibility_to
            )

        if not symbol_from.is_final and symbol_to.is_final:
            self.changes.marked("final", module, store_key, ref, data)

        if not symbol_from.is_abstract and symbol_to.is_abstract:
            self.changes.marked("abstract", module, store_key, ref, data)

    def _deprecation_message(self, symbol: Symbol, data: ApiRecord, module: str) -> str:
        """Get the deprecation message (excluding version number) if the API is deprecated.

        Malformed deprecation notices are recorded as actions to fix.
        """
        api_type = api_type_of(symbol)
        if not api_type.is_deprecatable or not symbol.is_deprecated:
            return ""

        store_key = api_type.store_key
        ref = symbol_ref(symbol)

        def fix(message: str) -> None:
            self.actions.add(ACTION_FIX_DEPRECATION, module, store_key, ref, data, message)

        notices = symbol.deprecations
        if not notices:
            fix(MESSAGE_MISSING_DEPRECATION_MESSAGE)
            return ""

        if len(notices) > 1:
            fix(MESSAGE_MULTIPLE_DEPRECATIONS)
            return ""

        parts = list(notices[0])
        if not parts:
            fix(MESSAGE_MISSING_DEPRECATION_MESSAGE)
            return ""

        if _VERSION_NUMBER.match(parts[0]):
            parts = parts[1:]
        else:
            # Assume the message is there without a version number.
            fix(MESSAGE_MALFORMED_VERSION)

        if not parts:
            fix(MESSAGE_MISSING_DEPRECATION_MESSAGE)
            return ""

        return " ".join(parts)

    def _has_relation_config(
        self, table: SymbolTable, class_symbol: ClassSymbol | None
    ) -> bool:
        return table.is_a(class_symbol, self.config.data_object_class) or table.is_a(
            class_symbol, self.config.extension_class
        )

    def _module_for(self, symbol_from: Symbol, symbol_to: Symbol | None) -> str:
        """Module the API belongs to, from the old file if there is one."""
        file_path = symbol_from.file
        if file_path is None and symbol_to is not None:
            file_path = symbol_to.file
        if file_path is None:
            msg = f"'{symbol_from.name}' has no file in either version"
            raise ModuleResolutionError(msg)
        return file_to_module(file_path, self.config.clone_dir)


__all__ = [
    "MESSAGE_DEPRECATED_NOT_REMOVED",
    "MESSAGE_INTERNAL_NOT_DEPRECATED",
    "MESSAGE_MALFORMED_VERSION",
    "MESSAGE_MISSING_DEPRECATION_MESSAGE",
    "MESSAGE_MULTIPLE_DEPRECATIONS",
    "MESSAGE_REMOVED_NOT_DEPRECATED",
    "BreakingChangesComparer",
]
