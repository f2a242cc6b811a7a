"""Error taxonomy for composing contracts.

Two families share one base. Validation errors are raised by the binder and
the lifecycle before anything is sent; they name the draft field to point
at. Network, service and authentication errors come back from the contract
service calls and carry that service's own wording.

Every error is recoverable: the lifecycle records it in ``last_error`` and
returns to the phase the user was working in.
"""

from __future__ import annotations

from typing import Any


class ComposerError(Exception):
    """A failure the user can read and act on.

    Attributes:
        message: Text shown to the user as-is.
        details: Context for logs (field, contract type, status code...).
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Log record for the failure, keyed like the service's error payloads."""
        return {
            "kind": type(self).__name__,
            "error": self.message,
            **self.details,
        }


class ValidationError(ComposerError):
    """Draft input that cannot be turned into a request or a save.

    ``field`` is the wire name of the input at fault (``clientName``,
    a parameter key, ``title``...).
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value
        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)[:100]


class MissingTypeError(ValidationError):
    """Raised when no contract type has been selected."""

    def __init__(self) -> None:
        super().__init__("Please select a contract type.", field="contractType")


class MissingPartyError(ValidationError):
    """Raised when a party name is empty."""

    def __init__(self, field: str) -> None:
        super().__init__(
            "Please fill in all general information fields.",
            field=field,
        )


class MissingParameterError(ValidationError):
    """Raised when a required contract parameter has no value."""

    def __init__(self, key: str, label: str | None = None) -> None:
        super().__init__(f"Please provide a value for {label or key}.", field=key)
        self.key = key


class InvalidOptionError(ValidationError):
    """Raised when a clause option is set to an unknown variation."""

    def __init__(self, key: str, value: Any) -> None:
        super().__init__(
            f"'{value}' is not a valid choice for clause option '{key}'.",
            field=key,
            value=value,
        )
        self.key = key


class MissingTitleError(ValidationError):
    """Raised when saving a contract without a title."""

    def __init__(self) -> None:
        super().__init__("Please enter a title for the contract", field="title")


class UnknownFieldError(ValidationError):
    """Raised when editing a field the selected contract type does not define."""

    def __init__(self, field: str, type_id: str) -> None:
        super().__init__(
            f"Contract type '{type_id}' has no field '{field}'",
            field=field,
            details={"contract_type": type_id},
        )


class ContractTypeNotFoundError(ComposerError):
    """Raised when a contract type is not registered in the catalog."""

    def __init__(self, type_id: str, available: list[str] | None = None) -> None:
        super().__init__(
            f"Unknown contract type: '{type_id}'. "
            f"Available types: {', '.join(available or [])}",
            {"contract_type": type_id},
        )
        self.type_id = type_id


class NetworkError(ComposerError):
    """Raised when the collaborator could not be reached."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(
            "Network error. Please try again.",
            {"operation": operation, "cause": message},
        )
        self.operation = operation


class ServiceError(ComposerError):
    """Raised when the collaborator answered with a structured error.

    The message is the collaborator's own text, shown to the user verbatim.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, {"status_code": status_code} if status_code else None)
        self.status_code = status_code


class AuthenticationError(ComposerError):
    """Raised when the session credential is missing or rejected."""

    def __init__(self, message: str = "Authentication required. Please log in again.") -> None:
        super().__init__(message)


class InvalidTransitionError(ComposerError):
    """Raised when a draft operation is not legal in the current phase."""

    def __init__(self, action: str, phase: str) -> None:
        super().__init__(
            f"Cannot {action} while the draft is {phase}",
            {"action": action, "phase": phase},
        )
        self.action = action
        self.phase = phase
