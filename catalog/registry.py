"""Contract Types Registry - Defines all supported contract types and their inputs."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from composer.exceptions import ContractTypeNotFoundError


class ParameterKind(Enum):
    """Input kinds a contract parameter can take."""
    TEXT = "text"
    NUMBER = "number"
    ENUM = "enum"


@dataclass(frozen=True)
class ParameterSpec:
    """A required input for a contract type."""
    key: str
    label: str
    kind: ParameterKind = ParameterKind.TEXT
    enum_values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind is ParameterKind.ENUM and not self.enum_values:
            raise ValueError(f"Parameter '{self.key}' is an enum without values")


@dataclass(frozen=True)
class ClauseVariation:
    """One selectable wording of a clause."""
    value: str
    label: str


@dataclass(frozen=True)
class ClauseOption:
    """A clause choice point. The first variation is the default."""
    key: str
    label: str
    variations: tuple[ClauseVariation, ...]

    def __post_init__(self) -> None:
        if not self.variations:
            raise ValueError(f"Clause option '{self.key}' has no variations")

    @property
    def default(self) -> str:
        return self.variations[0].value

    def allows(self, value: str) -> bool:
        return any(variation.value == value for variation in self.variations)


@dataclass(frozen=True)
class ContractTypeDefinition:
    """Schema for one kind of generated contract."""
    id: str
    jurisdiction: str
    parameters: tuple[ParameterSpec, ...] = ()
    clause_options: tuple[ClauseOption, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        for label, keys in (
            ("parameter", [p.key for p in self.parameters]),
            ("clause option", [o.key for o in self.clause_options]),
        ):
            duplicates = {k for k in keys if keys.count(k) > 1}
            if duplicates:
                raise ValueError(
                    f"Contract type '{self.id}' has duplicate {label} keys: "
                    f"{', '.join(sorted(duplicates))}"
                )

    def clause_option(self, key: str) -> ClauseOption | None:
        for option in self.clause_options:
            if option.key == key:
                return option
        return None

    def parameter(self, key: str) -> ParameterSpec | None:
        for spec in self.parameters:
            if spec.key == key:
                return spec
        return None


def _variations(*pairs: tuple[str, str]) -> tuple[ClauseVariation, ...]:
    return tuple(ClauseVariation(value=value, label=label) for value, label in pairs)


# =============================================================================
# CONTRACT TYPES REGISTRY
# =============================================================================

CONTRACT_TYPES: dict[str, ContractTypeDefinition] = {

    # -------------------------------------------------------------------------
    # EMPLOYMENT
    # -------------------------------------------------------------------------

    "California Employment Agreement": ContractTypeDefinition(
        id="California Employment Agreement",
        jurisdiction="California",
        description="At-will employment agreement for a California employee",
        parameters=(
            ParameterSpec("annual_salary", "Annual Salary ($)", ParameterKind.NUMBER),
            ParameterSpec(
                "overtime_status",
                "Overtime Status",
                ParameterKind.ENUM,
                enum_values=("Exempt", "Non-Exempt"),
            ),
            ParameterSpec("arbitration_county", "Arbitration County"),
            ParameterSpec("governing_law_county", "Governing Law County"),
        ),
        clause_options=(
            ClauseOption(
                "at_will_employment",
                "At-Will Employment Clause",
                _variations(
                    ("default", "Standard At-Will"),
                    ("with_cause_examples", 'At-Will with "For Cause" Examples'),
                ),
            ),
            ClauseOption(
                "arbitration",
                "Arbitration Clause",
                _variations(
                    ("none", "None"),
                    ("jams_provider", "Arbitration via JAMS"),
                    ("aaa_provider", "Arbitration via AAA"),
                ),
            ),
            ClauseOption(
                "class_action_waiver",
                "Class Action Waiver",
                _variations(
                    ("none", "No Waiver"),
                    ("default", "Include Waiver"),
                ),
            ),
        ),
    ),

    "Independent Contractor Agreement": ContractTypeDefinition(
        id="Independent Contractor Agreement",
        jurisdiction="New York",
        description="Engagement of an independent contractor for defined services",
        parameters=(
            ParameterSpec("scope_of_services", "Scope of Services"),
            ParameterSpec("hourly_rate", "Hourly Rate ($)", ParameterKind.NUMBER),
            ParameterSpec(
                "payment_terms",
                "Payment Terms",
                ParameterKind.ENUM,
                enum_values=("Net 15", "Net 30", "Net 60"),
            ),
        ),
        clause_options=(
            ClauseOption(
                "ip_ownership",
                "Intellectual Property",
                _variations(
                    ("work_for_hire", "Work Made for Hire"),
                    ("license_back", "Assignment with License Back"),
                ),
            ),
            ClauseOption(
                "termination",
                "Termination",
                _variations(
                    ("convenience_30_days", "Either Party on 30 Days' Notice"),
                    ("for_cause_only", "For Cause Only"),
                ),
            ),
        ),
    ),

    # -------------------------------------------------------------------------
    # CONFIDENTIALITY
    # -------------------------------------------------------------------------

    "Mutual Non-Disclosure Agreement": ContractTypeDefinition(
        id="Mutual Non-Disclosure Agreement",
        jurisdiction="Delaware",
        description="Two-way confidentiality agreement for exploratory discussions",
        parameters=(
            ParameterSpec("purpose", "Purpose of Disclosure"),
            ParameterSpec("term_years", "Confidentiality Term (years)", ParameterKind.NUMBER),
        ),
        clause_options=(
            ClauseOption(
                "residuals",
                "Residuals Clause",
                _variations(
                    ("none", "No Residuals Clause"),
                    ("standard", "Standard Residuals Clause"),
                ),
            ),
            ClauseOption(
                "non_solicitation",
                "Non-Solicitation",
                _variations(
                    ("none", "None"),
                    ("twelve_months", "12-Month Employee Non-Solicit"),
                ),
            ),
        ),
    ),
}


class ContractTypeCatalog:
    """Read-only lookup of contract type definitions keyed by id."""

    def __init__(self, definitions: Iterable[ContractTypeDefinition] = ()) -> None:
        self._definitions: dict[str, ContractTypeDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ContractTypeDefinition) -> None:
        """Add a definition. Ids are unique and never replaced."""
        if definition.id in self._definitions:
            raise ValueError(f"Contract type '{definition.id}' is already registered")
        self._definitions[definition.id] = definition

    def lookup(self, type_id: str) -> ContractTypeDefinition:
        """Get the definition for a contract type.

        Raises:
            ContractTypeNotFoundError: If the type is not registered
        """
        try:
            return self._definitions[type_id]
        except KeyError:
            raise ContractTypeNotFoundError(type_id, sorted(self._definitions)) from None

    def ids(self) -> list[str]:
        return list(self._definitions)

    def definitions(self) -> list[ContractTypeDefinition]:
        return list(self._definitions.values())

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._definitions

    def __iter__(self) -> Iterator[ContractTypeDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)


DEFAULT_CATALOG = ContractTypeCatalog(CONTRACT_TYPES.values())


def get_contract_type(type_id: str) -> ContractTypeDefinition:
    """Get a definition from the default catalog.

    Args:
        type_id: The contract type identifier

    Returns:
        The ContractTypeDefinition for that type

    Raises:
        ContractTypeNotFoundError: If the contract type is not found
    """
    return DEFAULT_CATALOG.lookup(type_id)


def list_contract_types(catalog: ContractTypeCatalog | None = None) -> dict[str, list[str]]:
    """List contract types grouped by jurisdiction.

    Returns:
        Dict mapping jurisdictions to lists of contract type ids
    """
    by_jurisdiction: dict[str, list[str]] = {}
    if catalog is None:
        catalog = DEFAULT_CATALOG
    for definition in catalog:
        by_jurisdiction.setdefault(definition.jurisdiction, []).append(definition.id)
    return by_jurisdiction
