import logging
import requests
import threading
from typing import Callable, Optional, Union
from dataclasses import dataclass

import http_request
from request import Request
from response import Response
from query_sync import url_query
from components import ComponentPosition, Focus
from event import Event, EventKind, Events, EventSender
from req_struct import HttpMethod, HttpResponse, RequestFailure


logger = logging.getLogger(__name__)

Transport = Callable[[HttpMethod, str, str], Optional[HttpResponse]]
Result = Union[HttpResponse, RequestFailure]


@dataclass
class AwaitState:
    # AwaitState {{{
    waiting: bool = False
    method: Optional[HttpMethod] = None
    url: str = ""
    # }}}


class App:
    """
    Root coordinator. Owns the single Focus value, both halves
    of the form and the in flight flag; every event is applied
    here, on the thread running the main loop.
    """
    # App {{{

    def __init__(self, events: Events,
                 transport: Transport = http_request.request) -> None:
        self.events = events
        self.transport = transport
        self.focus = Focus(ComponentPosition.RequestUrl)
        self.request = Request(self.focus)
        self.response = Response(self.focus)
        self.await_request = AwaitState()

    def dispatch(self, event: Event) -> bool:
        """
        Applies one event, returns False once the loop should stop.
        """
        # dispatch {{{
        match event.kind:
            case EventKind.KeyInput:
                self.key_handle(event.data)

            case EventKind.Request:
                self.request_handle()

            case EventKind.Response:
                self.response_handle(event.data)

            case EventKind.SetQuery:
                source, query = event.data
                self.set_query_handle(query, source)

            case EventKind.ChangeFocus:
                self.change_focus(event.data)

            case EventKind.Tick:
                pass

            case EventKind.Quit:
                return False

        return True
        # }}}

    def key_handle(self, key: str) -> None:
        # key_handle {{{
        if self.request.is_focused():
            self.request.key_handle(key, self.events.sender())
        elif self.response.is_focused():
            self.response.key_handle(key, self.events.sender())
        # }}}

    def change_focus(self, position: ComponentPosition) -> None:
        # change_focus {{{
        self.focus.move(position)
        self.response.select(position)
        # }}}

    def set_query_handle(self, query: str,
                         source: Optional[ComponentPosition] = None) -> None:
        """
        Applies the query to the field that did not produce it, a
        stale echo would otherwise overwrite newer keystrokes. Both
        sides skip the update when they already hold the query, so
        applying it never produces new events.
        """
        # set_query_handle {{{
        if source != self.request.query.position:
            self.request.query.set_data(query)
        if source != self.request.url.position:
            self.request.url.set_query(query)
        # }}}

    def request_handle(self) -> None:
        """
        Starts the round trip on a worker thread, its
        result comes back later as a Response event.
        """
        # request_handle {{{
        if self.await_request.waiting:
            logger.info("Request ignored, %s %s still in flight",
                        self.await_request.method.value,
                        self.await_request.url)
            return

        method = self.request.get_method()
        if method not in http_request.HANDLERS:
            logger.info("No handler for method %s", method.value)
            return

        url = self.request.get_url()
        body = self.request.get_body()
        self.await_request = AwaitState(True, method, url)

        request_thread = threading.Thread(
            target=send_request,
            args=(self.transport, method, url, body, self.events.sender()),
            daemon=True
        )
        request_thread.start()
        # }}}

    def response_handle(self, result: Result) -> None:
        # response_handle {{{
        self.await_request = AwaitState()

        if isinstance(result, RequestFailure):
            self.response.set_error(str(result))
        else:
            self.response.set_data(result)
        # }}}

    def prefill(self, method: HttpMethod, url: str) -> None:
        """
        Loads an initial method and url, as if typed in.
        """
        # prefill {{{
        self.request.method.method = method
        self.request.url.set_data(url)
        query = url_query(url)
        if query is not None:
            self.set_query_handle(query, ComponentPosition.RequestUrl)
        # }}}
    # }}}


def send_request(transport: Transport, method: HttpMethod, url: str,
                 body: str, sender: EventSender) -> None:
    """
    Primary function of the request thread. Always delivers
    exactly one Response event; request_handle only starts it
    for methods the transport handles.
    """
    # send_request {{{
    try:
        result = transport(method, url, body)
    except (requests.RequestException, ValueError) as exception:
        logger.warning("%s %s failed: %s", method.value, url, exception)
        result = RequestFailure(str(exception))
    except Exception as exception:
        logger.exception("%s %s failed unexpectedly", method.value, url)
        result = RequestFailure(f"{type(exception).__name__}: {exception}")

    sender.send(Event(EventKind.Response, result))
    # }}}
