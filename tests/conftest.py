"""Shared fixtures: a scripted content service behind httpx.MockTransport."""

import json

import httpx
import pytest

from contentdesk.api.client import ContentClient
from contentdesk.auth import CredentialStore

ORIGIN = "https://api.test"
FUTURE = 4_102_444_800  # 2100-01-01


class FakeService:
    """Answers requests from a table of canned responses and records them.

    A route registered with a list of responses replays them in order; the
    last one repeats once the list is exhausted.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.hooks = {}

    def on(self, method, path, *responses, status=200):
        queued = [r if isinstance(r, tuple) else (status, r) for r in responses]
        self.routes[(method, path)] = queued or [(status, None)]
        return self

    def before(self, method, path, hook):
        """Call *hook(request)* before answering *method path*."""
        self.hooks[(method, path)] = hook
        return self

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def bodies(self, method, path):
        return [json.loads(r.content) if r.content else None for r in self.calls(method, path)]

    @property
    def transport(self):
        return httpx.MockTransport(self)

    def __call__(self, request):
        self.requests.append(request)
        key = (request.method, request.url.path)
        hook = self.hooks.get(key)
        if hook is not None:
            hook(request)
        if key not in self.routes:
            return httpx.Response(404, json={"message": f"no route {key}"})
        queued = self.routes[key]
        status, body = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(body, Exception):
            raise body
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def store(tmp_path, service):
    s = CredentialStore(tmp_path, api_origin=ORIGIN, transport=service.transport)
    s.store("test-token-123", FUTURE)
    return s


@pytest.fixture
def client(store, service):
    return ContentClient(store, ORIGIN, transport=service.transport)
