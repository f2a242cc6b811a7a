"""Contract type catalog.

Each contract type is pure data: a jurisdiction, the parameters the user
must supply and the clause options they may pick from. Everything
downstream (binding, form fields, generation requests) iterates these
definitions, so adding a type is a registry entry and nothing else.

Usage:
    from catalog import get_contract_type

    definition = get_contract_type("California Employment Agreement")
    for option in definition.clause_options:
        print(option.label, option.default)
"""

from catalog.registry import (
    CONTRACT_TYPES,
    DEFAULT_CATALOG,
    ClauseOption,
    ClauseVariation,
    ContractTypeCatalog,
    ContractTypeDefinition,
    ParameterKind,
    ParameterSpec,
    get_contract_type,
    list_contract_types,
)

__all__ = [
    # Schema
    "ParameterKind",
    "ParameterSpec",
    "ClauseVariation",
    "ClauseOption",
    "ContractTypeDefinition",
    # Registry
    "ContractTypeCatalog",
    "CONTRACT_TYPES",
    "DEFAULT_CATALOG",
    "get_contract_type",
    "list_contract_types",
]
