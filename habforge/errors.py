"""Exception hierarchy for HabForge."""


class HabForgeError(Exception):
    """Base exception for HabForge engine failures."""

    pass


class InvalidDimensions(HabForgeError, ValueError):
    """A required dimension is missing or not strictly positive."""

    def __init__(self, shape: str, field: str, value=None):
        self.shape = shape
        self.field = field
        self.value = value
        if value is None:
            detail = "is missing"
        else:
            detail = f"must be positive (got {value})"
        super().__init__(f"{shape} dimension '{field}' {detail}")


class UnsupportedShape(HabForgeError, NotImplementedError):
    """The shape has no closed-form implementation for an operation."""

    def __init__(self, shape: str, operation: str):
        self.shape = shape
        self.operation = operation
        super().__init__(f"{operation} is not implemented for {shape} habitats")


class UnknownDurationCategory(HabForgeError, ValueError):
    """A mission duration falls outside every configured duration range."""

    def __init__(self, duration_days: int):
        self.duration_days = duration_days
        super().__init__(
            f"Mission duration of {duration_days} days matches no duration category"
        )


class StandardsUnavailable(HabForgeError):
    """No standards configuration could be produced by a provider."""

    pass
