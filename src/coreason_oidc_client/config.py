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
Configuration for the coreason-oidc-client package.
"""

from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OidcClientConfig(BaseSettings):
    """
    Client-level defaults for signin requests.

    Instances are frozen: per-call `SigninOptions` override a value for one request
    and never modify the configuration.

    Attributes:
        client_id (str | None): The client identifier registered with the provider.
        client_secret (SecretStr | None): The client secret, persisted with pending signins.
        scope (str): The requested scopes. Defaults to "openid".
        redirect_uri (str | None): Where the provider sends the user back to.
        authority (str | None): The provider base URL. The discovery URL is derived from it.
        metadata_url (str | None): Explicit discovery URL. Takes precedence over authority.
        metadata (dict | None): A discovery document to use instead of fetching one.
    """

    model_config = SettingsConfigDict(
        env_prefix="COREASON_OIDC_",
        case_sensitive=False,
        frozen=True,
    )

    unsafe_local_dev: bool = False
    http_timeout: float = Field(default=10.0, description="Timeout in seconds for the discovery request.")
    storage_path: Path | None = Field(default=None, description="File used by the default FileStorage.")

    client_id: str | None = None
    client_secret: SecretStr | None = None
    scope: str = "openid"
    redirect_uri: str | None = None
    authority: str | None = None
    metadata_url: str | None = None
    metadata: dict[str, Any] | None = None

    prompt: str | None = None
    display: str | None = None
    max_age: int | None = None
    ui_locales: str | None = None
    id_token_hint: str | None = None
    login_hint: str | None = None
    acr_values: str | None = None
    resource: str | None = None
    response_mode: str | None = None
    extra_query_params: dict[str, Any] | None = None
    extra_token_params: dict[str, Any] | None = None

    @field_validator("authority", "metadata_url", mode="after")
    @classmethod
    def validate_https(cls, v: str | None, info: ValidationInfo) -> str | None:
        """
        Ensures that discovery is fetched over HTTPS, unless strictly opted out for local dev.
        """
        if v and urlsplit(v).scheme.lower() == "http" and not info.data.get("unsafe_local_dev", False):
            raise ValueError("HTTPS is required for production. Set 'unsafe_local_dev=True' only for local testing.")
        return v

    @field_validator("scope")
    @classmethod
    def validate_scope(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Scope must not be empty (e.g., 'openid profile').")
        return v.strip()
