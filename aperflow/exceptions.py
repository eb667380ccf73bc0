"""Common exceptions for APERFlow.

Stage gate denials (wrong stage, wrong role, incomplete fields) are values,
not exceptions; see ``aperflow.gate.Denied``. The exceptions below cover the
conditions that cannot be expressed as a gate decision, plus
``AccessDeniedError`` for callers that prefer raising a denial.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aperflow.gate import Denied


class AperFlowError(Exception):
    """Base exception for all APERFlow errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        """Initialize exception with message and optional context."""
        super().__init__(message)
        self.context = context or {}


class RecordNotFoundError(AperFlowError):
    """Raised when an operation targets an unknown record id."""

    def __init__(self, record_id: str, context: dict[str, Any] | None = None):
        super().__init__(f"Evaluation record '{record_id}' not found", context)
        self.record_id = record_id


class StorageUnavailableError(AperFlowError):
    """Raised when the record store or draft cache backend fails.

    Transient: every write is idempotent or stage-checked at commit, so the
    caller may retry the same operation.
    """

    retryable = True


class InvalidStorageKeyError(AperFlowError, ValueError):
    """Raised when a key cannot name a stored document (empty, nested or hidden)."""

    def __init__(self, key: str, context: dict[str, Any] | None = None):
        super().__init__(f"Invalid storage key: {key!r}", context)
        self.key = key


class AccessDeniedError(AperFlowError):
    """Raised when a caller asks for a denied decision to be enforced."""

    def __init__(self, decision: "Denied", context: dict[str, Any] | None = None):
        message = f"Action denied: {decision.reason.value}"
        if decision.fields:
            message += f" ({', '.join(decision.fields)})"
        super().__init__(message, context)
        self.decision = decision

    @property
    def reason(self):
        return self.decision.reason


class ConfigValidationError(AperFlowError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_key: str | None = None):
        super().__init__(message, {"config_key": config_key} if config_key else None)
        self.config_key = config_key
