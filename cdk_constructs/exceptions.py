class ConstructsError(Exception):
    """
    Base class for every error raised by the constructs in this package.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ConstructsError, ValueError):
    """
    A required input was missing, null or out of range when an input
    parameter object was built.
    """


class NotFoundError(ConstructsError, KeyError):
    """
    A key was read from the parameter store before any deployment wrote it.
    This usually means the producing construct was never deployed into the
    environment, or was deployed under a different environment name.
    """

    def __init__(self, key: str, message: str = None) -> None:
        super().__init__(
            message
            or f"Parameter '{key}' does not exist. Deploy the construct that "
            "produces it into this environment first."
        )
        self.key = key

    def __str__(self) -> str:
        return self.message
