"""Shared fixtures for retrieval unit tests."""

from collections.abc import Mapping
from dataclasses import dataclass, field

import pytest

from doimeta.config import ResolverConfig
from doimeta.retrieve import Retriever, TransportResponse


@dataclass
class FakeTransport:
    """In-memory transport answering from a URL -> response table.

    Unknown URLs answer 404. Every call is recorded in ``requests``.
    """

    responses: dict[str, TransportResponse] = field(default_factory=dict)
    requests: list[tuple[str, dict[str, str], bool]] = field(default_factory=list)
    closed: bool = False

    def get(
        self,
        url: str,
        headers: Mapping[str, str],
        follow_redirects: bool = True,
    ) -> TransportResponse:
        self.requests.append((url, dict(headers), follow_redirects))
        return self.responses.get(url, TransportResponse(status_code=404, url=url))

    def close(self) -> None:
        self.closed = True

    def serve(self, url: str, body: bytes, content_type: str, status_code: int = 200) -> None:
        """Register a response for ``url``."""
        self.responses[url] = TransportResponse(
            status_code=status_code, url=url, body=body, content_type=content_type
        )


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Empty fake transport."""
    return FakeTransport()


@pytest.fixture
def retriever(fake_transport: FakeTransport) -> Retriever:
    """Retriever wired to the fake transport with default settings."""
    return Retriever(ResolverConfig(user_agent="doimeta-tests"), transport=fake_transport)
