"""
Planning errors.

Every error is a synchronous validation failure raised before any resource is
registered with the Pulumi engine. None are retryable: planning performs no
I/O, so the same input fails the same way every time. Each error names the
offending domain or config field so the stack configuration can be fixed
without reading the source.
"""


class PlanningError(Exception):
    """Base class for all planning errors."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field!r}, message={self.message!r})"


class DuplicateDomainError(PlanningError):
    """Raised when the same apex appears more than once in the topology."""

    def __init__(self, apex: str) -> None:
        self.apex = apex
        super().__init__(
            apex,
            "apex domain is configured more than once across the main and "
            "redirect domains",
        )


class UnknownDomainRoleError(PlanningError):
    """Raised when a domain carries a role the planner cannot handle here."""

    def __init__(self, apex: str, role: object, expected: str = "MAIN or REDIRECT") -> None:
        self.apex = apex
        self.role = role
        super().__init__(apex, f"domain role {role!r} is not valid here (expected {expected})")


class MissingRequiredConfigError(PlanningError):
    """Raised when a configuration value the topology requires is absent."""

    def __init__(self, field: str, reason: str = "required configuration value is missing") -> None:
        super().__init__(field, reason)


class InvalidRegionError(PlanningError):
    """Raised when a region-bound resource is planned for the wrong region."""

    def __init__(self, purpose: str, actual: str | None, required: str) -> None:
        self.purpose = purpose
        self.actual = actual
        self.required = required
        super().__init__(
            purpose,
            f"must be deployed in region {required!r}, but region {actual!r} is configured",
        )


def require_region(actual: str | None, required: str, purpose: str) -> None:
    """
    Fail fast unless ``actual`` is ``required``.

    Route 53 DNSSEC key material, Route 53 health check metrics and CloudFront
    edge certificates only exist in us-east-1. The region is never corrected
    silently.
    """
    if actual != required:
        raise InvalidRegionError(purpose, actual, required)
