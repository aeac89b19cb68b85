from __future__ import annotations

from cilclient.auth import AppOnlyAuthProvider, SigningAuthProvider, create_auth_provider
from cilclient.core.config import Credentials
from cilclient.endpoints import Endpoints

##########################################
#     Tests for create_auth_provider     #
##########################################


def test_create_auth_provider_signing(signing_credentials: Credentials) -> None:
    assert isinstance(create_auth_provider(signing_credentials), SigningAuthProvider)


def test_create_auth_provider_app_only(
    app_only_credentials: Credentials, endpoints: Endpoints
) -> None:
    provider = create_auth_provider(app_only_credentials, endpoints)
    assert isinstance(provider, AppOnlyAuthProvider)
    assert provider.token is None
