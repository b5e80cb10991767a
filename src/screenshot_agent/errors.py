"""Exception types shared across the capture pipeline."""


class ScreenshotAgentError(Exception):
    """Base class for all errors raised by screenshot-agent."""


class NotFoundError(ScreenshotAgentError):
    """No clipboard image and no qualifying file."""

    def __init__(self, message: str = "no image found"):
        super().__init__(message)


class OperationError(ScreenshotAgentError):
    """Filesystem, trash or external-tool failure."""


class ClipboardTooLargeError(OperationError):
    """A clipboard payload exceeded the configured size cap."""

    def __init__(self, program: str, limit: int):
        super().__init__(f"{program}: clipboard image exceeds {limit} bytes")
        self.program = program
        self.limit = limit


class TempPathError(OperationError):
    """No free temp path could be generated."""


class TrashError(OperationError):
    """Moving a file to the trash failed."""
