r"""Base class of the authentication strategies."""

from __future__ import annotations

__all__ = ["AuthProvider"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from cilclient.request.descriptor import RequestDescriptor


class AuthProvider(ABC):
    """Attach credentials to a request descriptor.

    One provider is created per client and its mode never changes.
    """

    @abstractmethod
    async def authorize(self, descriptor: RequestDescriptor, client: httpx.AsyncClient) -> None:
        """Attach credentials to ``descriptor`` in place.

        Args:
            descriptor: The request to authenticate.
            client: The HTTP client, for providers that need a network
                exchange to obtain their credentials.

        Raises:
            AuthAcquisitionError: If the credentials could not be
                obtained. The request must then not be sent.
        """
