"""Exception types raised while declaring resource graphs.

Every error carries a ``context`` dict naming what was involved (node names,
lookup queries, allowed values) so callers can report failures without
parsing the message.

Exception Hierarchy:
    ComponentError (base)
    ├── ConfigurationError - Options or graph violate a precondition
    ├── ExternalLookupError - A pre-existing resource could not be resolved
    └── ProvisioningError - The apply engine rejected a declared node
"""

from typing import Any, Dict, Mapping, Optional


def format_context(context: Mapping[str, Any]) -> str:
    return ", ".join(f"{key}={value}" for key, value in context.items())


class ComponentError(Exception):
    """Base exception for all rzcomponents errors.

    Attributes:
        message: Human-readable error description
        context: Names and values involved in the failure
    """

    def __init__(self, message: str, context: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} (context: {format_context(self.context)})"


class ConfigurationError(ComponentError):
    """Raised when component options or the declared graph are invalid.

    Examples:
        - Two nodes declared with the same name
        - A dependency naming a node that was never declared
        - A policy statement without actions
        - A log retention value CloudWatch does not accept
    """

    pass


class ExternalLookupError(ComponentError):
    """Raised when a referenced pre-existing resource cannot be resolved.

    Examples:
        - ECS cluster or autoscaling group not found by name
        - No ACM certificate issued for the requested domain
        - Caller lacks permission to describe the hosted zone
    """

    pass


class ProvisioningError(ComponentError):
    """Raised by apply-engine integrations when a declared node is rejected.

    Components never raise this themselves; it exists so callers handing the
    graph to an engine can report rejections with the same context format.
    """

    pass
