"""Exception hierarchy for acigroup."""

from typing import List, Optional


class AcigroupError(Exception):
    """Base error for all acigroup failures."""
    pass


class ConfigValidationError(AcigroupError, ValueError):
    """Configuration rejected locally, before any API call."""
    pass


class InvalidResourceIdError(AcigroupError, ValueError):
    """Resource id could not be parsed."""
    pass


class ContainerGroupNotFoundError(AcigroupError):
    """The container group to import does not exist."""

    def __init__(self, resource_id: str):
        self.resource_id = resource_id
        super().__init__(f"Container Group {resource_id!r} was not found")


class OperationError(AcigroupError):
    """An API call failed while performing a lifecycle operation."""

    def __init__(self, operation: str, name: str, resource_group: str, cause: Exception):
        self.operation = operation
        self.name = name
        self.resource_group = resource_group
        self.cause = cause
        super().__init__(f"{operation} Container Group {name!r} (Resource Group {resource_group!r}): {cause}")


class OperationTimeoutError(AcigroupError):
    """A lifecycle operation did not complete within its timeout."""

    def __init__(self, operation: str, name: str, resource_group: str, timeout: float):
        self.operation = operation
        self.name = name
        self.resource_group = resource_group
        self.timeout = timeout
        super().__init__(
            f"timed out after {timeout:g}s while {operation} Container Group {name!r} "
            f"(Resource Group {resource_group!r})"
        )


class ResourceExistsError(AcigroupError):
    """Resource already exists and must be imported before it can be managed."""

    def __init__(self, resource_id: str):
        self.resource_id = resource_id
        super().__init__(
            f"A resource with the ID {resource_id!r} already exists - to be managed by acigroupctl "
            f"this resource needs to be imported with 'acigroupctl import'"
        )


class ReplacementRequiredError(AcigroupError):
    """Desired configuration changes fields that cannot be updated in place."""

    def __init__(self, name: str, fields: List[str]):
        self.name = name
        self.fields = fields
        super().__init__(
            f"Container Group {name!r} cannot be updated in place, changed fields require replacement: "
            f"{', '.join(fields)}. Destroy and apply again."
        )


class PollTimeoutError(AcigroupError):
    """Polling did not observe the target state before the timeout."""

    def __init__(self, timeout: float, last_state: Optional[str], target: List[str]):
        self.timeout = timeout
        self.last_state = last_state
        self.target = target
        super().__init__(
            f"timeout while waiting for state to become {target!r} "
            f"(last state: {last_state!r}, timeout: {timeout:g}s)"
        )


class UnexpectedStateError(AcigroupError):
    """Polling observed a state that is neither pending nor target."""

    def __init__(self, state: str, expected: List[str]):
        self.state = state
        self.expected = expected
        super().__init__(f"unexpected state {state!r}, wanted one of {expected!r}")
