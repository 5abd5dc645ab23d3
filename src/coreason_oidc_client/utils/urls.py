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
Query string helpers.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

__all__ = ["add_query_param", "encode_component"]

# Characters left unescaped by ECMAScript encodeURIComponent
_UNRESERVED = "-_.!~*'()"


def encode_component(value: str | int | float | bool) -> str:
    """
    Percent-encodes a single query component.

    Booleans render as `true`/`false` to match what providers expect on the wire.
    """
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    return quote(text, safe=_UNRESERVED)


def add_query_param(url: str, name: str, value: Any) -> str:
    """
    Appends `name=value` to the query string of `url`.

    A mapping value is flattened: each of its entries is appended as its own
    parameter, in insertion order. Entries whose value is None are skipped.

    Args:
        url: The URL to extend.
        name: The parameter name. Ignored when `value` is a mapping.
        value: A scalar or a mapping of further parameters.

    Returns:
        The extended URL.
    """
    if isinstance(value, Mapping):
        for key, nested in value.items():
            if nested is None:
                continue
            url = add_query_param(url, str(key), nested)
        return url

    if "?" not in url:
        url += "?"
    if not url.endswith("?"):
        url += "&"

    return f"{url}{encode_component(name)}={encode_component(value)}"
