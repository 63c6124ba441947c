"""In-process fake of the Xaman REST API built on ``httpx.MockTransport``."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, Union

import httpx

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class MockXamanApi:
    """Routes requests to queued responses and records every request.

    Responses are queued per ``(method, path)``; the last queued response for
    a route is reused once the queue is drained.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Responder]] = {}
        self.transport = httpx.MockTransport(self._handle)

    def add(self, method: str, path: str, *responses: Responder) -> "MockXamanApi":
        self._routes.setdefault((method.upper(), path), []).extend(responses)
        return self

    def add_json(
        self, method: str, path: str, body: Any, status_code: int = 200
    ) -> "MockXamanApi":
        return self.add(method, path, httpx.Response(status_code, json=body))

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method.upper() and r.url.path.endswith(path)
        ]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, path), queue in self._routes.items():
            if request.method == method and request.url.path.endswith(path):
                responder = queue.pop(0) if len(queue) > 1 else queue[0]
                if callable(responder):
                    return responder(request)
                return httpx.Response(
                    responder.status_code,
                    headers=responder.headers,
                    content=responder.content,
                )
        return httpx.Response(404, json={"error": True, "message": "No route"})


def request_json(request: httpx.Request) -> Optional[Any]:
    if not request.content:
        return None
    return json.loads(request.content)


def payload_details(
    payload_uuid: str, *, exists: bool = True, **meta: Any
) -> dict[str, Any]:
    """Minimal ``GET platform/payload/{uuid}`` body."""
    return {
        "meta": {"exists": exists, "uuid": payload_uuid, **meta},
        "application": {"uuidv4": "app-uuid", "name": "Test app"},
        "payload": {
            "tx_type": "SignIn",
            "request_json": {"TransactionType": "SignIn"},
            "expires_in_seconds": 300,
        },
        "response": None,
        "custom_meta": {"identifier": "order-1"},
    }


def payload_handle(payload_uuid: str) -> dict[str, Any]:
    """Minimal ``POST platform/payload`` body."""
    return {
        "uuid": payload_uuid,
        "next": {"always": f"https://xaman.app/sign/{payload_uuid}"},
        "refs": {
            "qr_png": f"https://xaman.app/sign/{payload_uuid}_q.png",
            "qr_matrix": f"https://xaman.app/sign/{payload_uuid}_q.json",
            "qr_uri_quality_opts": ["m", "q", "h"],
            "websocket_status": f"wss://xaman.app/sign/{payload_uuid}",
        },
        "pushed": False,
    }
