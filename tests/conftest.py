# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc_client

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from coreason_oidc_client.storage import MemoryStorage

DISCOVERY_URL = "https://idp.example.com/.well-known/openid-configuration"

DISCOVERY_DOCUMENT: dict[str, Any] = {
    "issuer": "https://idp.example.com/",
    "authorization_endpoint": "https://idp.example.com/authorize",
    "token_endpoint": "https://idp.example.com/oauth/token",
    "userinfo_endpoint": "https://idp.example.com/userinfo",
    "jwks_uri": "https://idp.example.com/.well-known/jwks.json",
}


class RecordingNavigator:
    """Collects navigated URLs instead of opening a browser."""

    def __init__(self) -> None:
        self.urls: list[str] = []

    def navigate(self, url: str) -> None:
        self.urls.append(url)


class DiscoveryServer:
    """Serves a discovery document through httpx.MockTransport and counts requests."""

    def __init__(self, document: Any = None, status_code: int = 200) -> None:
        self.document = DISCOVERY_DOCUMENT if document is None else document
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.document)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def discovery_server() -> DiscoveryServer:
    return DiscoveryServer()


@pytest.fixture
def make_server() -> Callable[..., DiscoveryServer]:
    return DiscoveryServer
