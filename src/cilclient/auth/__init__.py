r"""Authentication strategies.

Two mutually exclusive modes exist: request signing with the consumer
and access key pairs, and app-only bearer authentication.
"""

from __future__ import annotations

__all__ = [
    "AppOnlyAuthProvider",
    "AuthProvider",
    "OAuth1Signer",
    "SigningAuthProvider",
    "create_auth_provider",
]

from typing import TYPE_CHECKING

from cilclient.auth.app_only import AppOnlyAuthProvider
from cilclient.auth.base import AuthProvider
from cilclient.auth.signing import OAuth1Signer, SigningAuthProvider
from cilclient.endpoints import DEFAULT_ENDPOINTS

if TYPE_CHECKING:
    from cilclient.core.config import Credentials
    from cilclient.endpoints import Endpoints


def create_auth_provider(
    credentials: Credentials,
    endpoints: Endpoints = DEFAULT_ENDPOINTS,
) -> AuthProvider:
    """Create the provider matching the mode of ``credentials``.

    Example:
        ```pycon
        >>> from cilclient.auth import create_auth_provider
        >>> from cilclient.core.config import Credentials
        >>> provider = create_auth_provider(
        ...     Credentials(consumer_key="ck", consumer_secret="cs", app_only_auth=True)
        ... )
        >>> type(provider).__name__
        'AppOnlyAuthProvider'

        ```
    """
    if credentials.app_only_auth:
        return AppOnlyAuthProvider(credentials, token_url=endpoints.token_url)
    return SigningAuthProvider(credentials)
