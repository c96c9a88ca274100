from dataclasses import dataclass
from typing import Optional, Tuple

UNABLE_TO_CONNECT = "Unable to connect to the server. Please check your internet connection."
NETWORK_ERROR = (
    "Network error: Unable to connect to the server. "
    "Please check your internet connection and try again."
)

STATUS_MESSAGES = {
    401: "Authentication failed. Please log in again.",
    403: "You don't have permission to perform this action.",
    404: "The requested resource was not found.",
    0: UNABLE_TO_CONNECT,
    504: UNABLE_TO_CONNECT,
}
SERVER_ERROR = "A server error has occurred. Please try again later."


class ClientError(Exception):
    """Base class for everything the client raises."""


class ApiError(ClientError):
    """Non-success HTTP response; str(e) is '<status>: <message>'."""

    def __init__(self, status: int, message: str, body=None):
        self.status = status
        self.message = message
        self.body = body
        super().__init__(f"{status}: {message}")


class NetworkError(ClientError):
    """The request never produced a response."""

    def __init__(self, message: str = NETWORK_ERROR):
        super().__init__(message)


def status_message(status: int, extracted: Optional[str]) -> str:
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    if status == 500:
        return extracted or SERVER_ERROR
    return extracted or ""


@dataclass(frozen=True)
class ErrorReport:
    title: str
    message: str
    network: bool
    actions: Tuple[str, ...] = ("retry", "reload")


def describe_error(exc: BaseException) -> ErrorReport:
    """What the top-level error screen shows for an uncaught failure."""
    text = str(exc)
    lowered = text.lower()
    network = isinstance(exc, NetworkError) or any(k in lowered for k in ("fetch", "network", "connect"))
    if network:
        message = "Unable to connect to the server. Please check your internet connection and try again."
    else:
        message = text or "An unexpected error occurred."
    return ErrorReport(title="Something went wrong", message=message, network=network)
