"""Configuration binder.

Turns a selected contract type, party names, parameter values and clause
selections into a GenerationRequest. Pure: no network or storage access.
Rules are checked in a fixed order and the first failure is raised:

1. a contract type is selected
2. both party names are filled in
3. every parameter of the type has a value
4. every clause option holds one of its variations (absent ones take the default)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from catalog.registry import ContractTypeDefinition
from composer.exceptions import (
    InvalidOptionError,
    MissingParameterError,
    MissingPartyError,
    MissingTypeError,
)
from composer.models import GenerationRequest

logger = logging.getLogger("vibelegal.composer.binder")

CLIENT_NAME = "clientName"
OTHER_PARTY_NAME = "otherPartyName"


@dataclass
class Parties:
    """The two named parties of a contract."""

    client_name: str = ""
    other_party_name: str = ""

    def as_parameters(self) -> dict[str, str]:
        return {CLIENT_NAME: self.client_name, OTHER_PARTY_NAME: self.other_party_name}


def default_options(definition: ContractTypeDefinition | None) -> dict[str, str]:
    """Map every clause option of a type to its first variation."""
    if definition is None:
        return {}
    return {option.key: option.default for option in definition.clause_options}


def bind(
    definition: ContractTypeDefinition | None,
    parties: Parties,
    parameter_values: Mapping[str, str],
    option_values: Mapping[str, str],
) -> GenerationRequest:
    """Validate draft input and build a generation request.

    Args:
        definition: The selected contract type, or None if nothing is selected.
        parties: Client and other party names.
        parameter_values: User-entered parameter values keyed by parameter key.
        option_values: Selected variation values keyed by clause option key.

    Returns:
        A GenerationRequest ready to send.

    Raises:
        MissingTypeError: If no contract type is selected.
        MissingPartyError: If either party name is empty.
        MissingParameterError: If a parameter of the type has no value.
        InvalidOptionError: If a clause option holds an unknown variation.
    """
    if definition is None:
        raise MissingTypeError()

    if not parties.client_name:
        raise MissingPartyError(CLIENT_NAME)
    if not parties.other_party_name:
        raise MissingPartyError(OTHER_PARTY_NAME)

    for spec in definition.parameters:
        if not parameter_values.get(spec.key):
            raise MissingParameterError(spec.key, spec.label)

    options: dict[str, str] = dict(option_values)
    for option in definition.clause_options:
        if option.key not in options:
            logger.debug("Clause option %s unset, using default %s", option.key, option.default)
            options[option.key] = option.default
        elif not option.allows(options[option.key]):
            raise InvalidOptionError(option.key, options[option.key])

    return GenerationRequest(
        contract_type=definition.id,
        jurisdiction=definition.jurisdiction,
        parameters={**parties.as_parameters(), **parameter_values},
        options=options,
    )
