# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc_client

"""
MetadataService component for discovering and caching the provider's OIDC configuration.
"""

import json
from typing import Any

import anyio
import httpx
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from coreason_oidc_client.exceptions import (
    ConfigurationError,
    DiscoveryFetchError,
    InvalidMetadataError,
    MissingMetadataPropertyError,
)
from coreason_oidc_client.models import FetchState
from coreason_oidc_client.utils.logger import logger

OIDC_METADATA_URL_PATH = ".well-known/openid-configuration"

# Properties a provider may omit; anything else is required unless the caller says otherwise
OPTIONAL_METADATA_PROPERTIES = frozenset(
    {"token_endpoint", "check_session_iframe", "end_session_endpoint", "revocation_endpoint", "jwks_uri"}
)

tracer = trace.get_tracer(__name__)


class MetadataService:
    """
    Resolves the discovery URL, fetches the discovery document once and exposes its endpoints.

    The document is cached for the lifetime of the instance. There is no TTL and no
    revalidation; a document passed in at construction is never fetched.

    Attributes:
        client (httpx.AsyncClient): The HTTP client used for the discovery request.
        authority (str | None): The provider base URL.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        metadata_url: str | None = None,
        authority: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the MetadataService.

        Args:
            client: The async HTTP client to use for requests.
            metadata_url: Explicit discovery URL. Takes precedence over `authority`.
            authority: Provider base URL (e.g. https://my-tenant.auth0.com).
            metadata: A pre-fetched discovery document.
        """
        self.client = client
        self.authority = authority
        self._metadata_url = metadata_url
        self._metadata: dict[str, Any] | None = metadata
        self._state = FetchState.READY if metadata is not None else FetchState.UNFETCHED
        self._lock: anyio.Lock | None = None

    @property
    def fetch_state(self) -> FetchState:
        return self._state

    @property
    def metadata_url(self) -> str | None:
        return self.resolve_metadata_url()

    def resolve_metadata_url(self) -> str | None:
        """
        Returns the discovery URL, deriving it from the authority on first use.

        Returns:
            str | None: The discovery URL, or None if neither URL nor authority is configured.
        """
        if not self._metadata_url and self.authority:
            url = self.authority
            if OIDC_METADATA_URL_PATH not in url:
                url = f"{url.rstrip('/')}/{OIDC_METADATA_URL_PATH}"
            self._metadata_url = url

        return self._metadata_url or None

    async def _fetch_metadata(self, url: str) -> dict[str, Any]:
        """
        Issues the discovery request.

        Raises:
            DiscoveryFetchError: On transport failure or a non-success status.
            InvalidMetadataError: If the body is not a JSON object.
        """
        with tracer.start_as_current_span("fetch_metadata") as span:
            span.set_attribute("http.url", url)
            try:
                response = await self.client.get(url)
            except httpx.HTTPError as e:
                logger.error(f"Metadata request to {url} failed: {e}")
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise DiscoveryFetchError(f"Could not fetch metadata: {e}") from e

            span.set_attribute("http.status_code", response.status_code)
            if not response.is_success:
                logger.error(f"Metadata request to {url} returned {response.status_code}")
                span.set_status(Status(StatusCode.ERROR, f"status {response.status_code}"))
                raise DiscoveryFetchError(
                    f"Could not fetch metadata: {response.status_code}", status=response.status_code
                )

            try:
                data = response.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.error(f"Metadata from {url} is not valid JSON: {e}")
                span.set_status(Status(StatusCode.ERROR, "invalid json"))
                raise InvalidMetadataError(
                    f"Invalid JSON response from {url}: {e}", status=response.status_code
                ) from e

            if not isinstance(data, dict):
                logger.error(f"Metadata from {url} is not a JSON object")
                span.set_status(Status(StatusCode.ERROR, "not an object"))
                raise InvalidMetadataError(
                    f"Metadata from {url} is not a JSON object", status=response.status_code
                )

            span.set_status(Status(StatusCode.OK))
            return data

    async def get_metadata(self) -> dict[str, Any]:
        """
        Returns the discovery document, fetching it on first use.

        Concurrent first callers share a single request: the fetch runs under a lock and
        the cache is re-checked once the lock is held. A failed fetch is not cached, so the
        next call tries again.

        Returns:
            dict[str, Any]: The discovery document.

        Raises:
            ConfigurationError: If no authority or metadata URL is configured.
            DiscoveryFetchError: If the request fails or returns a non-success status.
        """
        if self._metadata is not None:
            return self._metadata

        url = self.resolve_metadata_url()
        if not url:
            raise ConfigurationError("No authority or metadata URL configured")

        if self._lock is None:
            self._lock = anyio.Lock()

        async with self._lock:
            if self._metadata is not None:
                return self._metadata

            self._state = FetchState.FETCHING
            logger.debug(f"Fetching OIDC metadata from {url}")
            try:
                metadata = await self._fetch_metadata(url)
            except BaseException:
                self._state = FetchState.FAILED
                raise

            self._metadata = metadata
            self._state = FetchState.READY
            return metadata

    async def get_metadata_property(self, name: str, optional: bool | None = None) -> Any:
        """
        Looks up a single property of the discovery document.

        Args:
            name: The property name (e.g. `authorization_endpoint`).
            optional: Return None instead of raising when the property is absent. Defaults to
                True for the endpoints in OPTIONAL_METADATA_PROPERTIES and False otherwise.

        Raises:
            MissingMetadataPropertyError: If the property is absent and not optional.
        """
        if optional is None:
            optional = name in OPTIONAL_METADATA_PROPERTIES

        metadata = await self.get_metadata()
        # A JSON null counts as absent
        value = metadata.get(name)
        if value is None:
            if optional:
                return None
            logger.warning(f"Metadata does not contain property {name}")
            raise MissingMetadataPropertyError(name)
        return value

    async def get_issuer(self) -> str:
        return await self.get_metadata_property("issuer")  # type: ignore[no-any-return]

    async def get_authorization_endpoint(self) -> str:
        return await self.get_metadata_property("authorization_endpoint")  # type: ignore[no-any-return]

    async def get_userinfo_endpoint(self) -> str:
        return await self.get_metadata_property("userinfo_endpoint")  # type: ignore[no-any-return]

    async def get_token_endpoint(self, optional: bool = True) -> str | None:
        # Optional by default although OpenID Connect Discovery marks it REQUIRED
        return await self.get_metadata_property("token_endpoint", optional)  # type: ignore[no-any-return]

    async def get_check_session_iframe(self) -> str | None:
        return await self.get_metadata_property("check_session_iframe", True)  # type: ignore[no-any-return]

    async def get_end_session_endpoint(self) -> str | None:
        return await self.get_metadata_property("end_session_endpoint", True)  # type: ignore[no-any-return]

    async def get_revocation_endpoint(self) -> str | None:
        return await self.get_metadata_property("revocation_endpoint", True)  # type: ignore[no-any-return]

    async def get_keys_endpoint(self) -> str | None:
        return await self.get_metadata_property("jwks_uri", True)  # type: ignore[no-any-return]
