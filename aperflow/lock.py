"""Lock types and field-completeness checks for APERFlow.

A lock is one atomic rule about one field of a section payload. Gates (see
``aperflow.gate``) compose locks into the completeness check a role must pass
before its section can be committed.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, NotRequired, TypedDict


class LockType(StrEnum):
    """
    Built-in lock types for completeness checks.

    - EXISTS: Field must be present and not None/blank
    - IS_TRUE: Field must be exactly True (explicit acknowledgements)
    - IN_LIST: Field value must be one of the allowed values
    """

    EXISTS = "exists"
    IS_TRUE = "is_true"
    IN_LIST = "in_list"

    def validate(self, value: Any, expected_value: Any = None) -> bool:
        if self == LockType.EXISTS:
            if value is None:
                return False
            if isinstance(value, str):
                return len(value.strip()) > 0
            if isinstance(value, (list, dict)):
                return len(value) > 0
            return True

        if self == LockType.IS_TRUE:
            return value is True

        if self == LockType.IN_LIST:
            return value is not None and value in (expected_value or ())

        return False

    def failure_message(self, property_path: str, actual_value: Any, expected_value: Any = None) -> str:
        """Generate human-readable failure message for this lock type."""
        if self == LockType.EXISTS:
            return f"Field '{property_path}' is required but missing or empty"

        if self == LockType.IS_TRUE:
            return f"Field '{property_path}' must be explicitly acknowledged"

        if self == LockType.IN_LIST:
            return f"Field '{property_path}' should be one of {list(expected_value or ())} but is '{actual_value}'"

        return f"Field '{property_path}' failed validation for lock type '{self.value}'"


class LockDefinitionDict(TypedDict):
    """Lock configuration, as gate definitions declare it."""

    property_path: str
    type: str
    expected_value: NotRequired[Any]
    error_message: NotRequired[str]


@dataclass(frozen=True)
class LockResult:
    """
    Result of validating one lock against a payload.

    Attributes:
        success: Whether validation passed
        property_path: Field that was validated
        lock_type: Type of lock that was evaluated
        actual_value: Value found in the payload (None when missing)
        expected_value: Expected value for comparison (if applicable)
        error_message: Human-readable error message, empty on success
    """

    success: bool
    property_path: str
    lock_type: LockType
    actual_value: Any = None
    expected_value: Any = None
    error_message: str = ""


class SimpleLock:
    """
    Lock validating a single top-level field of a section payload.
    """

    lock_type: LockType
    property_path: str
    expected_value: Any
    custom_error_message: str | None

    def __init__(self, config: LockDefinitionDict) -> None:
        lock_type_value = config.get("type")
        if isinstance(lock_type_value, str):
            self.lock_type = LockType(lock_type_value.lower())
        else:
            self.lock_type = lock_type_value  # type: ignore[assignment]
        self.property_path = config.get("property_path")  # type: ignore[assignment]
        if not self.property_path:
            raise ValueError("Lock must have a property_path")
        self.expected_value = config.get("expected_value")
        if self.lock_type == LockType.IN_LIST and not self.expected_value:
            raise ValueError(f"Lock type {self.lock_type.value} requires expected_value")
        self.custom_error_message = config.get("error_message")

    def validate(self, payload: dict[str, Any]) -> LockResult:
        value = payload.get(self.property_path) if isinstance(payload, dict) else None
        is_valid = self.lock_type.validate(value, self.expected_value)

        if is_valid:
            error_message = ""
        elif self.custom_error_message:
            error_message = self.custom_error_message
        else:
            error_message = self.lock_type.failure_message(self.property_path, value, self.expected_value)

        return LockResult(
            success=is_valid,
            property_path=self.property_path,
            lock_type=self.lock_type,
            actual_value=value,
            expected_value=self.expected_value,
            error_message=error_message,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert lock to JSON-serializable dictionary."""
        data: dict[str, Any] = {"property_path": self.property_path, "type": self.lock_type.value}
        if self.expected_value is not None:
            data["expected_value"] = self.expected_value
        return data

    def __repr__(self) -> str:
        return f"SimpleLock({self.property_path!r}, {self.lock_type.value})"


Lock = SimpleLock


class LockFactory:
    """Build locks from their definitions."""

    @staticmethod
    def create(config: LockDefinitionDict) -> Lock:
        return SimpleLock(config)
