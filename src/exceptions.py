"""Project-wide custom exception types."""

from typing import Optional


class FetchFailure(RuntimeError):
    """Raised when the remote submission source cannot deliver a usable payload.

    ``status`` holds the HTTP status code when the server answered, ``None``
    for transport errors or malformed bodies.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:  # noqa: D401 – simple constructor
        super().__init__(message)
        self.message = message
        self.status = status
