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
Custom exceptions for the coreason-oidc-client package.
"""


class CoreasonOidcError(Exception):
    """Base exception for all coreason-oidc-client errors."""


class ConfigurationError(CoreasonOidcError):
    """Raised when neither an authority nor a metadata URL is configured."""


class DiscoveryFetchError(CoreasonOidcError):
    """
    Raised when the discovery document cannot be fetched.

    Attributes:
        status (int | None): The HTTP status returned by the provider, or None for transport failures.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class InvalidMetadataError(DiscoveryFetchError):
    """Raised when the discovery response is not a JSON object."""


class MissingMetadataPropertyError(CoreasonOidcError):
    """
    Raised when a required property is absent from the discovery document.

    Attributes:
        name (str): The missing property name.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"Metadata does not contain property {name}")
        self.name = name
