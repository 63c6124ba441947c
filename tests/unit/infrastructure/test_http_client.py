"""Unit tests for the resilient request sender."""

from __future__ import annotations

import asyncio

import httpx
import pytest
from pydantic import BaseModel

from xaman_sdk.application.misc_dtos import PingResponseDTO, UserTokensRequestDTO
from xaman_sdk.domain.errors import XamanApiError
from xaman_sdk.env import XamanSettings
from xaman_sdk.infrastructure.http.http_client import USER_AGENT, XamanHttpClient
from tests.conftest import API_KEY, API_SECRET
from tests.fixtures import MockXamanApi, request_json


class Pong(BaseModel):
    pong: bool


def make_sender(settings: XamanSettings, api: MockXamanApi) -> XamanHttpClient:
    return XamanHttpClient(settings, transport=api.transport)


class TestHeaders:
    """Test header injection and URL building."""

    @pytest.mark.asyncio
    async def test_credentials_and_standard_headers(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add_json("GET", "platform/ping", {"pong": True})
        await make_sender(settings, api).send("GET", "platform/ping", Pong)

        request = api.requests[0]
        assert str(request.url) == "https://xaman.test/api/v1/platform/ping"
        assert request.headers["X-API-Key"] == API_KEY
        assert request.headers["X-API-Secret"] == API_SECRET
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"] == USER_AGENT

    @pytest.mark.asyncio
    async def test_public_call_omits_credentials(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add_json("GET", "platform/ping", {"pong": True})
        await make_sender(settings, api).get_public("platform/ping", Pong)

        request = api.requests[0]
        assert "X-API-Key" not in request.headers
        assert "X-API-Secret" not in request.headers

    @pytest.mark.asyncio
    async def test_request_model_body_uses_wire_format(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add_json("POST", "platform/user-tokens", {"tokens": []})
        await make_sender(settings, api).post(
            "platform/user-tokens", dict, UserTokensRequestDTO(tokens=["t1"])
        )
        assert request_json(api.requests[0]) == {"tokens": ["t1"]}

    @pytest.mark.asyncio
    async def test_raw_json_string_body(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add_json("POST", "platform/app-storage", {"ok": True})
        await make_sender(settings, api).post(
            "platform/app-storage", dict, '{"name": "Wietse"}'
        )
        request = api.requests[0]
        assert request.headers["Content-Type"] == "application/json"
        assert request_json(request) == {"name": "Wietse"}

    @pytest.mark.asyncio
    async def test_caller_built_client_is_used_and_left_open(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add_json("GET", "xapp-jwt/authorize", {"pong": True})
        sender = make_sender(settings, api)
        async with sender.build_client(extra_headers={"X-API-OTT": "ott"}) as client:
            await sender.send("GET", "xapp-jwt/authorize", Pong, client=client)
            assert not client.is_closed
        assert api.requests[0].headers["X-API-OTT"] == "ott"


class TestRetries:
    """Test the bounded linear retry policy."""

    @pytest.mark.asyncio
    async def test_server_errors_retried_up_to_max_retries(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add("GET", "platform/ping", httpx.Response(500))
        with pytest.raises(XamanApiError) as exc_info:
            await make_sender(settings, api).send("GET", "platform/ping", Pong)

        assert exc_info.value.status_code == 500
        # One initial attempt plus max_retries retries.
        assert len(api.requests) == settings.max_retries + 1

    @pytest.mark.asyncio
    async def test_recovers_after_transient_server_errors(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add(
            "GET",
            "platform/ping",
            httpx.Response(502),
            httpx.Response(503),
            httpx.Response(200, json={"pong": True}),
        )
        result = await make_sender(settings, api).send("GET", "platform/ping", Pong)
        assert result.pong is True
        assert len(api.requests) == 3

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add("GET", "platform/ping", httpx.Response(400))
        with pytest.raises(XamanApiError) as exc_info:
            await make_sender(settings, api).send("GET", "platform/ping", Pong)
        assert exc_info.value.status_code == 400
        assert len(api.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_errors_exhaust_into_synthetic_500(
        self, settings: XamanSettings
    ) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        api = MockXamanApi().add("GET", "platform/ping", refuse)
        with pytest.raises(XamanApiError) as exc_info:
            await make_sender(settings, api).send("GET", "platform/ping", Pong)

        assert exc_info.value.status_code == 500
        assert "after multiple retries" in exc_info.value.message
        assert len(api.requests) == settings.max_retries + 1

    @pytest.mark.asyncio
    async def test_retry_delay_is_linear(
        self, settings: XamanSettings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        delays: list[float] = []

        async def fake_sleep(delay: float) -> None:
            delays.append(delay)

        monkeypatch.setattr(
            "xaman_sdk.infrastructure.http.http_client.asyncio.sleep", fake_sleep
        )
        slow = settings.model_copy(update={"retry_delay": 2.0})
        api = MockXamanApi().add("GET", "platform/ping", httpx.Response(500))
        with pytest.raises(XamanApiError):
            await make_sender(slow, api).send("GET", "platform/ping", Pong)
        assert delays == [2.0, 4.0, 6.0]

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, settings: XamanSettings) -> None:
        slow = settings.model_copy(update={"retry_delay": 60.0})
        api = MockXamanApi().add("GET", "platform/ping", httpx.Response(500))
        task = asyncio.create_task(
            make_sender(slow, api).send("GET", "platform/ping", Pong)
        )
        while not api.requests:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


class TestErrorDecoding:
    """Test mapping of error envelopes onto XamanApiError."""

    @pytest.mark.asyncio
    async def test_fatal_envelope(self, settings: XamanSettings) -> None:
        body = {
            "error": True,
            "message": "Invalid credentials",
            "reference": "ref-1",
            "code": 401,
        }
        api = MockXamanApi().add_json("GET", "platform/ping", body, status_code=403)
        with pytest.raises(XamanApiError) as exc_info:
            await make_sender(settings, api).send("GET", "platform/ping", Pong)

        error = exc_info.value
        assert error.status_code == 403
        assert error.message == "Invalid credentials"
        assert error.reference == "ref-1"
        assert error.code == 401

    @pytest.mark.asyncio
    async def test_nested_envelope(self, settings: XamanSettings) -> None:
        body = {"error": {"reference": "ref-2", "code": 812}}
        api = MockXamanApi().add_json("GET", "platform/ping", body, status_code=400)
        with pytest.raises(XamanApiError) as exc_info:
            await make_sender(settings, api).send("GET", "platform/ping", Pong)

        error = exc_info.value
        assert error.message == (
            "Error code 812, see Xaman Dev Console, reference: 'ref-2'."
        )
        assert error.reference == "ref-2"
        assert error.code == 812

    @pytest.mark.asyncio
    async def test_fatal_envelope_with_blank_message_falls_back(
        self, settings: XamanSettings
    ) -> None:
        body = {"error": True, "message": "   "}
        api = MockXamanApi().add_json("GET", "platform/ping", body, status_code=401)
        with pytest.raises(XamanApiError) as exc_info:
            await make_sender(settings, api).send("GET", "platform/ping", Pong)
        assert exc_info.value.message == "Unauthorized"

    @pytest.mark.asyncio
    async def test_unknown_body_falls_back_to_reason_phrase(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add(
            "GET", "platform/ping", httpx.Response(404, text="<html>nope</html>")
        )
        with pytest.raises(XamanApiError) as exc_info:
            await make_sender(settings, api).send("GET", "platform/ping", Pong)
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Not Found"
        assert exc_info.value.reference is None


class TestDeserialization:
    """Test decoding of successful responses."""

    @pytest.mark.asyncio
    async def test_typed_response(self, settings: XamanSettings) -> None:
        body = {
            "pong": True,
            "auth": {
                "application": {"uuidv4": "app", "name": "My app"},
                "call": {"uuidv4": "call"},
            },
        }
        api = MockXamanApi().add_json("GET", "platform/ping", body)
        result = await make_sender(settings, api).send(
            "GET", "platform/ping", PingResponseDTO
        )
        assert isinstance(result, PingResponseDTO)
        assert result.auth is not None
        assert result.auth.application.name == "My app"

    @pytest.mark.asyncio
    async def test_null_body_is_an_api_error(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add(
            "GET", "platform/ping", httpx.Response(200, content=b"null")
        )
        with pytest.raises(XamanApiError, match="Unable to deserialize response"):
            await make_sender(settings, api).send("GET", "platform/ping", Pong)

    @pytest.mark.asyncio
    async def test_unexpected_shape_is_an_api_error(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add_json("GET", "platform/ping", {"unexpected": 1})
        with pytest.raises(XamanApiError) as exc_info:
            await make_sender(settings, api).send("GET", "platform/ping", Pong)
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_malformed_json_is_wrapped(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add(
            "GET", "platform/ping", httpx.Response(200, content=b"{not json")
        )
        with pytest.raises(XamanApiError, match="Unexpected error from Xaman API"):
            await make_sender(settings, api).send("GET", "platform/ping", Pong)
