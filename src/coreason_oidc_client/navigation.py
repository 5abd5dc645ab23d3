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
Navigators send the user agent to the provider's authorization endpoint.
"""

import webbrowser
from typing import Protocol

from coreason_oidc_client.utils.logger import logger


class NavigatorProtocol(Protocol):
    """Protocol for a one-way navigation of the user agent."""

    def navigate(self, url: str) -> None:
        ...


class BrowserNavigator:
    """
    Opens the URL in the system web browser.

    Navigation is fire-and-forget: if no browser can be launched the URL is logged so the
    user can open it by hand.
    """

    def __init__(self, new: int = 0) -> None:
        self.new = new

    def navigate(self, url: str) -> None:
        if not webbrowser.open(url, new=self.new):
            logger.warning(f"Could not open a browser. Visit this URL to sign in: {url}")
