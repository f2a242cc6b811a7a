"""Schema-driven form fields.

Front ends never branch on contract type ids; they ask for the fields of
the selected definition and draw whatever widget each field names.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from catalog.registry import (
    ClauseOption,
    ContractTypeDefinition,
    ParameterKind,
    ParameterSpec,
)


class WidgetKind(Enum):
    """Input widget to draw for a field."""

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"


@dataclass(frozen=True)
class FieldChoice:
    value: str
    label: str


@dataclass(frozen=True)
class FieldView:
    """Everything needed to draw one input."""

    key: str
    label: str
    widget: WidgetKind
    required: bool
    value: str = ""
    choices: tuple[FieldChoice, ...] = ()
    placeholder: str = ""

    @property
    def display_label(self) -> str:
        return f"{self.label} *" if self.required else self.label


@dataclass(frozen=True)
class FormSection:
    title: str
    fields: tuple[FieldView, ...]


_PARAMETER_WIDGETS: dict[ParameterKind, WidgetKind] = {
    ParameterKind.TEXT: WidgetKind.TEXT,
    ParameterKind.NUMBER: WidgetKind.NUMBER,
    ParameterKind.ENUM: WidgetKind.SELECT,
}


def _parameter_field(spec: ParameterSpec, value: str) -> FieldView:
    widget = _PARAMETER_WIDGETS[spec.kind]
    if widget is WidgetKind.SELECT:
        return FieldView(
            key=spec.key,
            label=spec.label,
            widget=widget,
            required=True,
            value=value,
            choices=tuple(FieldChoice(v, v) for v in spec.enum_values),
            placeholder=f"Select {spec.label}",
        )
    return FieldView(
        key=spec.key,
        label=spec.label,
        widget=widget,
        required=True,
        value=value,
        placeholder=f"Enter {spec.label}",
    )


def _clause_field(option: ClauseOption, value: str) -> FieldView:
    return FieldView(
        key=option.key,
        label=option.label,
        widget=WidgetKind.SELECT,
        required=False,
        value=value,
        choices=tuple(FieldChoice(v.value, v.label) for v in option.variations),
        placeholder=f"Select {option.label}",
    )


def render_field(item: ParameterSpec | ClauseOption, value: str | None = None) -> FieldView:
    """Describe the input for a parameter or clause option.

    Parameters map their kind to a widget; clause options are always a
    select over their variations.
    """
    if isinstance(item, ClauseOption):
        return _clause_field(item, value or "")
    if isinstance(item, ParameterSpec):
        return _parameter_field(item, value or "")
    raise TypeError(f"Cannot render a field for {type(item).__name__}")


def build_form(
    definition: ContractTypeDefinition,
    parameter_values: Mapping[str, str],
    option_values: Mapping[str, str],
) -> list[FormSection]:
    """Lay out the key parameters and clause options of a contract type."""
    return [
        FormSection(
            "Key Parameters",
            tuple(
                render_field(spec, parameter_values.get(spec.key))
                for spec in definition.parameters
            ),
        ),
        FormSection(
            "Clause Options",
            tuple(
                render_field(option, option_values.get(option.key))
                for option in definition.clause_options
            ),
        ),
    ]
