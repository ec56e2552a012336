import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from logunify.telemetry.models.event import LogUnifyEvent


class SampleEvent(LogUnifyEvent):
    def __init__(self, payload: bytes, schema_name="page_view", project_name="demo"):
        self._payload = payload
        self._schema_name = schema_name
        self._project_name = project_name

    def get_schema_name(self):
        return self._schema_name

    def get_project_name(self):
        return self._project_name

    def serialize(self):
        return self._payload

    def __repr__(self):
        return f"SampleEvent({self._payload!r})"


@pytest.fixture
def make_event():
    """Factory for events carrying a distinguishable payload."""

    def _make_event(index=0, schema_name="page_view", project_name="demo"):
        return SampleEvent(f"event-{index}".encode(), schema_name, project_name)

    return _make_event


class Collector:
    """In-process bulk endpoint that records every request it receives."""

    def __init__(self):
        self.requests = []
        self.statuses = []
        self.received = threading.Condition()
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), self._handler_class())
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self):
        host, port = self._server.server_address
        return f"http://{host}:{port}/api/events/_bulk"

    def respond_with(self, *statuses):
        """Queue response statuses; 200 once the queue is empty."""
        self.statuses.extend(statuses)

    def wait_for_requests(self, count, timeout=5.0):
        with self.received:
            return self.received.wait_for(lambda: len(self.requests) >= count, timeout)

    def _handler_class(self):
        collector = self

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length", 0))
                body = json.loads(self.rfile.read(length))
                with collector.received:
                    status = collector.statuses.pop(0) if collector.statuses else 200
                    collector.requests.append(
                        {"path": self.path, "headers": dict(self.headers), "body": body}
                    )
                    collector.received.notify_all()
                self.send_response(status)
                self.send_header("Content-Length", "0")
                self.end_headers()

            def log_message(self, format, *args):
                pass

        return Handler

    def start(self):
        self._thread.start()

    def stop(self):
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=1.0)


@pytest.fixture
def collector():
    collector = Collector()
    collector.start()
    try:
        yield collector
    finally:
        collector.stop()
