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
Correlation identifiers for pending signin attempts.
"""

from authlib.common.security import generate_token

# 40 characters over [A-Za-z0-9] gives ~238 bits of entropy
CORRELATION_ID_LENGTH = 40


def generate_correlation_id() -> str:
    """
    Generates an unguessable identifier used as OAuth `state` and as the storage key suffix.

    Drawn from `random.SystemRandom` via Authlib. Alphanumeric only, so it never changes
    when percent-encoded.

    Returns:
        str: A fresh identifier.
    """
    return generate_token(CORRELATION_ID_LENGTH)
