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
OidcClient component for starting the Authorization Code redirect flow.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from anyio.from_thread import BlockingPortal, start_blocking_portal
from opentelemetry import trace
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.trace import Status, StatusCode

from coreason_oidc_client.config import OidcClientConfig
from coreason_oidc_client.exceptions import CoreasonOidcError
from coreason_oidc_client.identifiers import generate_correlation_id
from coreason_oidc_client.metadata_service import MetadataService
from coreason_oidc_client.models import PendingSigninState, SigninOptions, SigninRequest
from coreason_oidc_client.navigation import BrowserNavigator, NavigatorProtocol
from coreason_oidc_client.storage import FileStorage, StorageProtocol
from coreason_oidc_client.utils.logger import logger
from coreason_oidc_client.utils.urls import add_query_param

STORAGE_KEY_PREFIX = "oidc-client:"
RESPONSE_TYPE = "code"

T = TypeVar("T")

tracer = trace.get_tracer(__name__)


def overlay(value: T | None, default: T | None) -> T | None:
    """Returns the per-call value when given, otherwise the configured default."""
    return value if value is not None else default


def create_signin_redirect_url(authorization_endpoint: str, properties: dict[str, Any]) -> str:
    """
    Folds the request properties into the authorization endpoint.

    Falsy values (None, "", 0, False, empty mappings) are never sent.
    """
    url = authorization_endpoint
    for name, value in properties.items():
        if not value:
            continue
        url = add_query_param(url, name, value)
    return url


class OidcClientAsync:
    """
    Async implementation of the OIDC client (The Core).
    Handles resources via async context manager.

    Attributes:
        config (OidcClientConfig): The client defaults.
        metadata_service (MetadataService): Discovery for the configured provider.
        storage (StorageProtocol): Where pending signin records are written.
        navigator (NavigatorProtocol): Sends the user agent to the provider.
    """

    def __init__(
        self,
        config: OidcClientConfig,
        storage: StorageProtocol | None = None,
        navigator: NavigatorProtocol | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the OidcClientAsync.

        Args:
            config: The configuration object.
            storage: Key-value store for pending signins. Defaults to `FileStorage`.
            navigator: Navigation target. Defaults to `BrowserNavigator`.
            client: External async client (optional). If not provided, one is created and closed on exit.
        """
        self.config = config
        self._internal_client = client is None

        if client:
            self._client = client
        else:
            self._client = httpx.AsyncClient(timeout=self.config.http_timeout)

        # Instrument the client for distributed tracing
        HTTPXClientInstrumentor().instrument_client(self._client)

        self.metadata_service = MetadataService(
            client=self._client,
            metadata_url=config.metadata_url,
            authority=config.authority,
            metadata=config.metadata,
        )
        self.storage: StorageProtocol = storage if storage is not None else FileStorage(config.storage_path)
        self.navigator: NavigatorProtocol = navigator if navigator is not None else BrowserNavigator()

    async def __aenter__(self) -> "OidcClientAsync":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._internal_client:
            await self._client.aclose()

    def _get_signin_state_properties(self, options: SigninOptions, state: str) -> PendingSigninState:
        config = self.config
        return PendingSigninState(
            id=state,
            client_id=config.client_id,
            client_secret=config.client_secret.get_secret_value() if config.client_secret else None,
            authority=config.authority,
            redirect_uri=overlay(options.redirect_uri, config.redirect_uri),
            scope=overlay(options.scope, config.scope),
            extra_token_params=overlay(options.extra_token_params, config.extra_token_params),
            response_mode=overlay(options.response_mode, config.response_mode),
            state=state,
            request_type=options.request_type,
            skip_user_info=options.skip_user_info,
        )

    def _get_signin_request_properties(self, options: SigninOptions, state: str) -> dict[str, Any]:
        config = self.config
        return {
            "client_id": config.client_id,
            "redirect_uri": overlay(options.redirect_uri, config.redirect_uri),
            "scope": overlay(options.scope, config.scope),
            "response_type": RESPONSE_TYPE,
            "prompt": overlay(options.prompt, config.prompt),
            "display": overlay(options.display, config.display),
            "max_age": overlay(options.max_age, config.max_age),
            "ui_locales": overlay(options.ui_locales, config.ui_locales),
            "id_token_hint": overlay(options.id_token_hint, config.id_token_hint),
            "login_hint": overlay(options.login_hint, config.login_hint),
            "acr_values": overlay(options.acr_values, config.acr_values),
            "resource": overlay(options.resource, config.resource),
            "extraQueryParams": overlay(options.extra_query_params, config.extra_query_params),
            "response_mode": overlay(options.response_mode, config.response_mode),
            "state": state,
            "request": options.request,
            "request_uri": options.request_uri,
        }

    async def create_signin_request(self, options: SigninOptions | None = None) -> SigninRequest:
        """
        Prepares a signin: resolves the authorization endpoint, stores the pending record and builds the URL.

        Does not navigate. Use this when the caller issues the redirect itself
        (e.g. an HTTP 302 from a web handler).

        Args:
            options: Per-call overrides of the configured defaults.

        Returns:
            SigninRequest: The redirect URL and the correlation identifier.

        Raises:
            ConfigurationError: If no authority or metadata URL is configured.
            DiscoveryFetchError: If the discovery document cannot be fetched.
            MissingMetadataPropertyError: If the provider publishes no authorization endpoint.
        """
        options = options or SigninOptions()

        # Endpoint must be known before anything is persisted
        authorization_endpoint = await self.metadata_service.get_authorization_endpoint()

        state = generate_correlation_id()
        pending = self._get_signin_state_properties(options, state)
        self.storage.set_item(f"{STORAGE_KEY_PREFIX}{state}", pending.to_json())
        logger.debug(f"Stored pending signin {STORAGE_KEY_PREFIX}{state}")

        properties = self._get_signin_request_properties(options, state)
        url = create_signin_redirect_url(authorization_endpoint, properties)
        return SigninRequest(url=url, state=state)

    async def signin_redirect(self, options: SigninOptions | None = None) -> None:
        """
        Starts the Authorization Code flow and sends the user agent to the provider.

        Emits an OpenTelemetry span `signin_redirect`. Errors from discovery propagate unchanged;
        nothing is stored or opened when discovery fails.

        Args:
            options: Per-call overrides of the configured defaults.

        Raises:
            CoreasonOidcError: If the authorization endpoint cannot be resolved.
        """
        with tracer.start_as_current_span("signin_redirect") as span:
            try:
                request = await self.create_signin_request(options)
            except CoreasonOidcError as e:
                logger.error(f"Signin redirect failed: {e}")
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            span.set_status(Status(StatusCode.OK))
            logger.info("Redirecting to the authorization endpoint")
            self.navigator.navigate(request.url)


class OidcClient:
    """
    Sync facade for OidcClientAsync.

    Calls run on a single event loop owned by a blocking portal, which lives until the
    facade is closed. Pooled HTTP connections are opened and closed on that loop.
    Use it as a context manager or call `close()` when done.
    """

    def __init__(
        self,
        config: OidcClientConfig,
        storage: StorageProtocol | None = None,
        navigator: NavigatorProtocol | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._async = OidcClientAsync(config, storage=storage, navigator=navigator, client=client)
        self._portal_cm = start_blocking_portal()
        self._portal: BlockingPortal | None = self._portal_cm.__enter__()

    def __enter__(self) -> "OidcClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._portal is None:
            return
        try:
            self._portal.call(self._async.__aexit__, exc_type, exc_val, exc_tb)
        finally:
            self._portal = None
            self._portal_cm.__exit__(None, None, None)

    def close(self) -> None:
        self.__exit__(None, None, None)

    def _call(self, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        if self._portal is None:
            raise RuntimeError("OidcClient is closed")
        return self._portal.call(func, *args)

    @property
    def metadata_service(self) -> MetadataService:
        return self._async.metadata_service

    def create_signin_request(self, options: SigninOptions | None = None) -> SigninRequest:
        return self._call(self._async.create_signin_request, options)

    def signin_redirect(self, options: SigninOptions | None = None) -> None:
        self._call(self._async.signin_redirect, options)
