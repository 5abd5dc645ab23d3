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
OpenID Connect client that discovers a provider and starts the Authorization Code redirect flow.
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .client import OidcClient, OidcClientAsync
from .config import OidcClientConfig
from .exceptions import (
    ConfigurationError,
    CoreasonOidcError,
    DiscoveryFetchError,
    InvalidMetadataError,
    MissingMetadataPropertyError,
)
from .metadata_service import MetadataService
from .models import FetchState, PendingSigninState, SigninOptions, SigninRequest
from .navigation import BrowserNavigator
from .storage import FileStorage, MemoryStorage
from .utils.urls import add_query_param

__all__ = [
    "BrowserNavigator",
    "ConfigurationError",
    "CoreasonOidcError",
    "DiscoveryFetchError",
    "FetchState",
    "FileStorage",
    "InvalidMetadataError",
    "MemoryStorage",
    "MetadataService",
    "MissingMetadataPropertyError",
    "OidcClient",
    "OidcClientAsync",
    "OidcClientConfig",
    "PendingSigninState",
    "SigninOptions",
    "SigninRequest",
    "add_query_param",
]
