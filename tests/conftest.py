from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from cilclient.core.config import Credentials
from cilclient.endpoints import Endpoints

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def signing_credentials() -> Credentials:
    """Create credentials for request signing."""
    return Credentials(
        consumer_key="ck",
        consumer_secret="cs",
        access_token="at",
        access_token_secret="ats",
    )


@pytest.fixture
def app_only_credentials() -> Credentials:
    """Create credentials for app-only bearer authentication."""
    return Credentials(consumer_key="ck", consumer_secret="cs", app_only_auth=True)


@pytest.fixture
def endpoints() -> Endpoints:
    """Create an endpoint table pointing to a fake host."""
    return Endpoints(
        rest_root="https://api.test/1.1/",
        user_stream="https://userstream.test/1.1/",
        site_stream="https://sitestream.test/1.1/",
        public_stream="https://stream.test/1.1/",
        media_upload="https://upload.test/1.1/",
        token_url="https://api.test/oauth2/token",
    )


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks.

    Returns:
        A Mock object that can be used as a callback function.
    """
    return Mock()
