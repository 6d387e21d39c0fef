from enum import Enum
from datetime import timedelta
from dataclasses import dataclass, field


class HttpMethod(Enum):
    # HttpMethod {{{
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    HEAD = "HEAD"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    # }}}


# Order the Method field cycles through
METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
)


@dataclass(frozen=True)
class HttpResponse():
    """
    A completed round trip, replaced as
    a whole on every successful request.
    """
    # HttpResponse {{{
    status: int
    reason: str
    delay: timedelta
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: list[str] = field(default_factory=list)

    def is_success(self) -> bool:
        return 200 <= self.status < 300

    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    def __str__(self) -> str:
        return f"{self.status} {self.reason}".strip()
    # }}}


@dataclass(frozen=True)
class RequestFailure():
    # RequestFailure {{{
    message: str

    def __str__(self) -> str:
        return self.message
    # }}}
