"""HTTP transports for DOI resolution.

A transport performs exactly one GET and reports the final response. The
retriever never talks to the network directly, so alternative backends (or
test doubles) only need to satisfy the ``Transport`` protocol.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import requests

from doimeta.config import ResolverConfig
from doimeta.errors import TransportError

__all__ = [
    "BACKENDS",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
]


@dataclass(frozen=True)
class TransportResponse:
    """Final response of one transport request.

    Attributes
    ----------
    status_code : int
        HTTP status code.
    url : str
        URL the response came from, after any redirects.
    body : bytes
        Response payload.
    content_type : str | None
        Content-Type header of the final response.
    location : str | None
        Location header, present on redirect responses.
    """

    status_code: int
    url: str
    body: bytes = b""
    content_type: str | None = None
    location: str | None = None


@runtime_checkable
class Transport(Protocol):
    """Blocking HTTP GET used by the retriever."""

    def get(
        self,
        url: str,
        headers: Mapping[str, str],
        follow_redirects: bool = True,
    ) -> TransportResponse:
        """Fetch ``url``, optionally following redirects."""
        ...

    def close(self) -> None:
        """Release pooled connections."""
        ...


class RequestsTransport:
    """Transport backed by a ``requests.Session``.

    Attributes
    ----------
    read_timeout : float
        Seconds to wait for each response.
    max_redirects : int
        Redirect hops followed before failing.
    user_agent : str
        User-Agent header sent with each request.
    """

    def __init__(
        self,
        read_timeout: float,
        max_redirects: int,
        user_agent: str,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize transport.

        Parameters
        ----------
        read_timeout : float
            Seconds to wait for each response.
        max_redirects : int
            Redirect hops followed before failing.
        user_agent : str
            User-Agent header value.
        session : requests.Session | None, optional
            Session to reuse; a new one is created when omitted.
        """
        self.read_timeout = read_timeout
        self.max_redirects = max_redirects
        self.user_agent = user_agent

        self._session = session or requests.Session()
        self._session.max_redirects = max_redirects
        self._session.headers["User-Agent"] = user_agent

    @classmethod
    def from_config(cls, config: ResolverConfig) -> "RequestsTransport":
        """Build a transport from resolver settings."""
        return cls(
            read_timeout=config.read_timeout,
            max_redirects=config.max_redirects,
            user_agent=config.user_agent,
        )

    def get(
        self,
        url: str,
        headers: Mapping[str, str],
        follow_redirects: bool = True,
    ) -> TransportResponse:
        """Perform a GET request.

        Parameters
        ----------
        url : str
            Absolute URL.
        headers : Mapping[str, str]
            Extra request headers.
        follow_redirects : bool, optional
            Follow 3xx responses to the final target (default: True).

        Returns
        -------
        TransportResponse
            The final response.

        Raises
        ------
        TransportError
            On connection failure, timeout or too many redirects.
        """
        try:
            response = self._session.get(
                url,
                headers=dict(headers),
                timeout=self.read_timeout,
                allow_redirects=follow_redirects,
            )
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}") from e

        return TransportResponse(
            status_code=response.status_code,
            url=response.url,
            body=response.content,
            content_type=response.headers.get("Content-Type"),
            location=response.headers.get("Location"),
        )

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()


TransportFactory = Callable[[ResolverConfig], Transport]

BACKENDS: dict[str, TransportFactory] = {
    "requests": RequestsTransport.from_config,
}
