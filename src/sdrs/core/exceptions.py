"""Core exceptions for SDRS request context and data access."""

from typing import Any

from sdrs.utils.exceptions import SdrsError


class ContextNotSetError(SdrsError):
    """Raised when attempting to access request context that is not set.

    This error indicates a programming error - operations requiring context
    are being called outside of a request_context() context manager.
    """

    def __init__(self, message: str = "Request context is not set"):
        super().__init__(message)


class DaoError(SdrsError):
    """Base class for data access errors."""

    pass


class MultipleRecordsFoundError(DaoError):
    """Raised when a single-record query matches more than one row.

    Attributes:
        model: Name of the queried model
    """

    def __init__(self, model: str):
        super().__init__(f"Multiple {model} records found where one was expected")
        self.model = model

    def __str__(self) -> str:
        return f"MultipleRecordsFoundError: {self.args[0]}"


class RecordNotFoundError(DaoError):
    """Raised when a record required by an operation does not exist.

    Attributes:
        model: Name of the queried model
        key: The lookup key that matched nothing
    """

    def __init__(self, model: str, key: Any):
        super().__init__(f"{model} not found: {key}")
        self.model = model
        self.key = key

    def __str__(self) -> str:
        return f"RecordNotFoundError: {self.args[0]}"


class DuplicateRuleError(DaoError):
    """Raised when creating a rule whose business key already has an active rule.

    Attributes:
        project_id: Project of the conflicting rule
        data_storage_name: Storage name of the conflicting rule
        rule_type: Type of the conflicting rule
    """

    def __init__(self, project_id: str, data_storage_name: str, rule_type: str):
        super().__init__(
            f"An active {rule_type} rule already exists for "
            f"{project_id}/{data_storage_name}"
        )
        self.project_id = project_id
        self.data_storage_name = data_storage_name
        self.rule_type = rule_type

    def __str__(self) -> str:
        return f"DuplicateRuleError: {self.args[0]}"
