"""Unit tests for the xApp, xApp JWT and user storage endpoints."""

from __future__ import annotations

import hashlib

import pytest

from xaman_sdk.application.xapp_dtos import XAppEventRequestDTO, XAppPushRequestDTO
from xaman_sdk.domain.errors import XamanValidationError
from xaman_sdk.env import XamanSettings
from xaman_sdk.infrastructure.http.http_client import XamanHttpClient
from xaman_sdk.infrastructure.user_store_client import XamanUserStoreClient
from xaman_sdk.infrastructure.xapp_client import XamanXAppClient, ott_refetch_hash
from xaman_sdk.infrastructure.xapp_jwt_client import XamanXAppJwtClient
from tests.conftest import ACCOUNT, API_KEY, API_SECRET
from tests.fixtures import MockXamanApi, request_json

OTT = "ott-token"
JWT = "header.claims.signature"
STORAGE_APP = {"name": "Test app", "uuidv4": "app-uuid"}


def make_sender(settings: XamanSettings, api: MockXamanApi) -> XamanHttpClient:
    return XamanHttpClient(settings, transport=api.transport)


class TestXAppClient:
    """Test one-time token reads and notifications."""

    def test_refetch_hash(self) -> None:
        expected = hashlib.sha1(
            f"{OTT}.{API_SECRET}.device-1".upper().encode()
        ).hexdigest()
        assert ott_refetch_hash(OTT, API_SECRET, "device-1") == expected

    @pytest.mark.asyncio
    async def test_get_ott_data(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add_json(
            "GET",
            f"platform/xapp/ott/{OTT}",
            {"locale": "en", "account": ACCOUNT, "nodetype": "MAINNET"},
        )
        client = XamanXAppClient(make_sender(settings, api), API_SECRET)
        data = await client.get_ott_data(OTT)
        assert data.account == ACCOUNT
        assert data.nodetype == "MAINNET"

    @pytest.mark.asyncio
    async def test_refetch_uses_hash_in_path(self, settings: XamanSettings) -> None:
        token_hash = ott_refetch_hash(OTT, API_SECRET, "device-1")
        api = MockXamanApi().add_json(
            "GET", f"platform/xapp/ott/{OTT}/{token_hash}", {"locale": "nl"}
        )
        client = XamanXAppClient(make_sender(settings, api), API_SECRET)
        data = await client.refetch_ott_data(OTT, "device-1")
        assert data.locale == "nl"
        assert len(api.requests) == 1

    @pytest.mark.asyncio
    async def test_refetch_requires_device_id(self, settings: XamanSettings) -> None:
        client = XamanXAppClient(make_sender(settings, MockXamanApi()), API_SECRET)
        with pytest.raises(XamanValidationError):
            await client.refetch_ott_data(OTT, " ")

    @pytest.mark.asyncio
    async def test_push(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add_json("POST", "platform/xapp/push", {"pushed": True})
        client = XamanXAppClient(make_sender(settings, api), API_SECRET)
        result = await client.push(
            XAppPushRequestDTO(user_token="user-1", body="Your order shipped")
        )
        assert result.pushed is True
        assert request_json(api.requests[0]) == {
            "user_token": "user-1",
            "body": "Your order shipped",
        }

    @pytest.mark.asyncio
    async def test_event_carries_silent_flag(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add_json(
            "POST", "platform/xapp/event", {"pushed": True, "uuid": "evt-1"}
        )
        client = XamanXAppClient(make_sender(settings, api), API_SECRET)
        result = await client.event(
            XAppEventRequestDTO(user_token="user-1", body="Ping", silent=True)
        )
        assert result.uuid == "evt-1"
        assert request_json(api.requests[0])["silent"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("user_token", "body"), [("", "Hi"), ("user-1", "  ")])
    async def test_push_validation(
        self, settings: XamanSettings, user_token: str, body: str
    ) -> None:
        api = MockXamanApi()
        client = XamanXAppClient(make_sender(settings, api), API_SECRET)
        with pytest.raises(XamanValidationError):
            await client.push(XAppPushRequestDTO(user_token=user_token, body=body))
        assert api.requests == []


class TestXAppJwtClient:
    """Test the OTT exchange and bearer-authenticated calls."""

    @pytest.mark.asyncio
    async def test_authorize_sends_credentials_and_ott(
        self, settings: XamanSettings
    ) -> None:
        body = {"ott": {"locale": "en"}, "app": {"name": "Test app"}, "jwt": JWT}
        api = MockXamanApi().add_json("GET", "xapp-jwt/authorize", body)
        result = await XamanXAppJwtClient(make_sender(settings, api)).authorize(OTT)

        headers = api.requests[0].headers
        assert headers["X-API-Key"] == API_KEY
        assert headers["X-API-Secret"] == API_SECRET
        assert headers["X-API-OTT"] == OTT
        assert result.jwt == JWT

    @pytest.mark.asyncio
    async def test_bearer_calls_omit_api_credentials(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add_json(
            "GET",
            "xapp-jwt/userdata/profile",
            {"operation": "READ", "data": {"profile": {"name": "Wietse"}}},
        )
        result = await XamanXAppJwtClient(make_sender(settings, api)).get_user_data(
            JWT, "profile"
        )

        headers = api.requests[0].headers
        assert headers["Authorization"] == f"Bearer {JWT}"
        assert "X-API-Key" not in headers
        assert "X-API-Secret" not in headers
        assert result.data["profile"]["name"] == "Wietse"

    @pytest.mark.asyncio
    async def test_set_user_data_from_mapping(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add_json(
            "POST",
            "xapp-jwt/userdata/profile",
            {"operation": "PERSIST", "persisted": True},
        )
        result = await XamanXAppJwtClient(make_sender(settings, api)).set_user_data(
            JWT, "profile", {"name": "Wietse"}
        )
        assert result.persisted is True
        assert request_json(api.requests[0]) == {"name": "Wietse"}

    @pytest.mark.asyncio
    async def test_set_user_data_from_json_string(
        self, settings: XamanSettings
    ) -> None:
        api = MockXamanApi().add_json(
            "POST",
            "xapp-jwt/userdata/profile",
            {"operation": "PERSIST", "persisted": True},
        )
        await XamanXAppJwtClient(make_sender(settings, api)).set_user_data(
            JWT, "profile", '{"name": "Wietse"}'
        )
        assert request_json(api.requests[0]) == {"name": "Wietse"}

    @pytest.mark.asyncio
    async def test_delete_user_data(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add_json(
            "DELETE",
            "xapp-jwt/userdata/profile",
            {"operation": "DELETE", "persisted": True},
        )
        result = await XamanXAppJwtClient(
            make_sender(settings, api)
        ).delete_user_data(JWT, "profile")
        assert result.operation == "DELETE"

    @pytest.mark.asyncio
    async def test_nftoken_detail(self, settings: XamanSettings) -> None:
        api = MockXamanApi().add_json(
            "GET",
            "xapp-jwt/nftoken-detail/000B0000",
            {"issuer": ACCOUNT, "token": "000B0000", "name": "Pepper"},
        )
        detail = await XamanXAppJwtClient(
            make_sender(settings, api)
        ).get_nftoken_detail(JWT, "000B0000")
        assert detail.issuer == ACCOUNT

    @pytest.mark.asyncio
    async def test_missing_jwt_rejected(self, settings: XamanSettings) -> None:
        api = MockXamanApi()
        client = XamanXAppJwtClient(make_sender(settings, api))
        with pytest.raises(XamanValidationError):
            await client.get_user_data("", "profile")
        with pytest.raises(XamanValidationError):
            await client.set_user_data(JWT, "profile", {})
        assert api.requests == []


class TestUserStoreClient:
    """Test the per-application storage."""

    @pytest.mark.asyncio
    async def test_store_get_and_clear(self, settings: XamanSettings) -> None:
        api = (
            MockXamanApi()
            .add_json(
                "POST",
                "platform/app-storage",
                {"application": STORAGE_APP, "stored": True, "data": {"level": 3}},
            )
            .add_json(
                "GET",
                "platform/app-storage",
                {"application": STORAGE_APP, "data": {"level": 3}},
            )
            .add_json(
                "DELETE",
                "platform/app-storage",
                {"application": STORAGE_APP, "stored": True, "data": None},
            )
        )
        store = XamanUserStoreClient(make_sender(settings, api))

        stored = await store.store({"level": 3})
        fetched = await store.get()
        cleared = await store.clear()

        assert stored.stored is True
        assert request_json(api.requests[0]) == {"level": 3}
        assert fetched.data == {"level": 3}
        assert fetched.application.uuidv4 == "app-uuid"
        assert cleared.data is None
