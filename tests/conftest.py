import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from app.services.events_api import EventsApi

API_BASE = "http://api.test"
SIGNED_URL = "https://storage.test/bucket/photo-key?X-Goog-Signature=abc"


class FakeBackend:
    """원격 API 흉내. (method, path) 별로 응답을 정해 두고 요청을 기록한다"""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Callable[[httpx.Request], Any]] = {}

    def on(self, method: str, path: str, status: int = 200, json_body: Any = None,
           handler: Optional[Callable[[httpx.Request], Any]] = None) -> None:
        if handler is None:
            def handler(request: httpx.Request, status=status, json_body=json_body):
                if json_body is None:
                    return httpx.Response(status)
                return httpx.Response(status, json=json_body)
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request):
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def calls(self) -> List[Tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]

    def sent(self, method: str, path: str) -> httpx.Request:
        for r in self.requests:
            if r.method == method and r.url.path == path:
                return r
        raise AssertionError(f"{method} {path} was not requested: {self.calls()}")

    def json_of(self, method: str, path: str) -> Any:
        return json.loads(self.sent(method, path).content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle), base_url=API_BASE)


class Recorder:
    # 알림/콜백 기록용
    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []
        self.after_save_calls = 0
        self.close_calls = 0

    def notify(self, severity: str, text: str) -> None:
        self.messages.append((severity, text))

    def after_save(self) -> None:
        self.after_save_calls += 1

    def on_close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def backend() -> FakeBackend:
    b = FakeBackend()
    b.on("POST", "/api/generateSignedUrls", json_body={
        "uploads": [{"fileKey": "photo-key", "signedGcsUrl": SIGNED_URL}],
    })
    b.on("PUT", "/bucket/photo-key", status=200)
    b.on("POST", "/api/events", status=201, json_body={"id": 1})
    b.on("PATCH", "/api/events/7", json_body={"id": 7})
    return b


@pytest.fixture
def api(backend: FakeBackend) -> EventsApi:
    return EventsApi(backend.client(), token="tok")


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
