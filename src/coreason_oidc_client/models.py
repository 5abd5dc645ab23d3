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
Data models for the coreason-oidc-client package.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FetchState(StrEnum):
    """Lifecycle of a cached discovery document."""

    UNFETCHED = "unfetched"
    FETCHING = "fetching"
    READY = "ready"
    FAILED = "failed"


class SigninOptions(BaseModel):
    """
    Per-call overrides for a signin redirect.

    Every field left as None falls back to the matching default in `OidcClientConfig`.
    `request`, `request_uri`, `request_type` and `skip_user_info` have no configured default.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    redirect_uri: str | None = None
    scope: str | None = None
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
    request: str | None = Field(default=None, description="A request object (JWT) passed by value.")
    request_uri: str | None = Field(default=None, description="A reference to a request object.")
    request_type: str | None = Field(default=None, description="Free-form tag stored with the pending signin.")
    skip_user_info: bool | None = None


class PendingSigninState(BaseModel):
    """
    The record persisted before navigating to the provider.

    Serialized with aliases so the stored JSON keeps the established field names
    (`extraTokenParams`, `skipUserInfo`).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    client_id: str | None = None
    client_secret: str | None = None
    authority: str | None = None
    redirect_uri: str | None = None
    scope: str | None = None
    extra_token_params: dict[str, Any] | None = Field(default=None, alias="extraTokenParams")
    response_mode: str | None = None
    state: str
    request_type: str | None = None
    skip_user_info: bool | None = Field(default=None, alias="skipUserInfo")

    def to_json(self) -> str:
        """Serialize for storage, dropping unset fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class SigninRequest(BaseModel):
    """
    A prepared authorization request.

    Attributes:
        url (str): The authorization endpoint with all query parameters applied.
        state (str): The correlation identifier sent as `state` and used as the storage key suffix.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    state: str
