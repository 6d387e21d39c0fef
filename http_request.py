import json
import time
import logging
import requests
from typing import Optional
from datetime import timedelta

from req_struct import HttpMethod, HttpResponse


logger = logging.getLogger(__name__)

# Methods the transport knows how to send
HANDLERS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
)

JSON_INDENT = 2


def request(method: HttpMethod, url: str,
            body: str) -> Optional[HttpResponse]:
    """
    Performs a single round trip, no retries and no
    timeout beyond what requests applies. Returns None
    for a method without a handler, raises
    requests.RequestException on failure.
    """
    # request {{{
    if method not in HANDLERS:
        return None

    data = None
    if method != HttpMethod.GET and body != "":
        data = body.encode("utf-8")

    logger.debug("%s %s (%d body bytes)", method.value, url,
                 0 if data is None else len(data))

    start = time.perf_counter()
    response = requests.request(method.value, url, data=data)
    delay = timedelta(seconds=time.perf_counter() - start)

    return HttpResponse(
        status=response.status_code,
        reason=response.reason or "",
        delay=delay,
        headers=list(response.headers.items()),
        body=pretty_print(response.text)
    )
    # }}}


def pretty_print(text: str) -> list[str]:
    """
    Breaks a response body into display lines,
    re-indenting it first when it parses as json.
    """
    # pretty_print {{{
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return text.splitlines()

    pretty = json.dumps(parsed, indent=JSON_INDENT, ensure_ascii=False)
    return pretty.splitlines()
    # }}}
