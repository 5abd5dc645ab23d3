import asyncio
import contextlib
import os
import sys

# Add src to path for running directly
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from coreason_oidc_client.config import OidcClientConfig
from coreason_oidc_client.client import OidcClientAsync
from coreason_oidc_client.models import SigninOptions
from coreason_oidc_client.storage import MemoryStorage


async def main() -> None:
    """
    Discovers the provider, stores the pending signin and opens the browser at the authorization endpoint.
    """
    config = OidcClientConfig(
        authority="https://accounts.google.com",
        client_id="my-client-id",
        redirect_uri="http://127.0.0.1:8400/callback",
        scope="openid profile email",
    )
    storage = MemoryStorage()

    async with OidcClientAsync(config, storage=storage) as client:
        print(f">>> Discovery URL: {client.metadata_service.metadata_url}")
        try:
            await client.signin_redirect(SigninOptions(prompt="select_account"))
        except Exception as e:
            print(f">>> Signin failed: {e}")
            return

    print(f">>> Pending signins: {storage.keys()}")


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())
