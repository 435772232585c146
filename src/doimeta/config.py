"""Resolver configuration dataclass."""

from dataclasses import asdict, dataclass, field
from typing import Any

from doimeta.audit.helpers import get_package_version
from doimeta.content_types import CSL_JSON, UNIXREF_XML

DEFAULT_RESOLVER_DOMAIN = "doi.org"
DEFAULT_BACKEND = "requests"
DEFAULT_READ_TIMEOUT = 10.0
DEFAULT_MAX_REDIRECTS = 10


def _default_user_agent() -> str:
    return f"doimeta/{get_package_version()}"


@dataclass
class ResolverConfig:
    """Configuration for DOI retrieval.

    Attributes
    ----------
    resolver_domain : str
        Domain resolver URLs are built under (default: "doi.org").
    backend : str | None
        Transport backend name. None leaves retrieval unconfigured.
    read_timeout : float
        Seconds to wait for the resolver to respond (default: 10).
    max_redirects : int
        Redirects followed before giving up (default: 10).
    user_agent : str
        User-Agent header sent with each request.
    accept : tuple[str, ...]
        Content types requested, in preference order.
    """

    resolver_domain: str = DEFAULT_RESOLVER_DOMAIN
    backend: str | None = DEFAULT_BACKEND
    read_timeout: float = DEFAULT_READ_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    user_agent: str = field(default_factory=_default_user_agent)
    accept: tuple[str, ...] = (UNIXREF_XML, CSL_JSON)

    def __post_init__(self) -> None:
        """Normalize and validate."""
        self.resolver_domain = self.resolver_domain.strip().strip("/")
        self.accept = tuple(self.accept)

        if not self.resolver_domain:
            raise ValueError("resolver_domain must not be empty")

        if "/" in self.resolver_domain:
            raise ValueError(
                f"resolver_domain must be a bare host name, got {self.resolver_domain!r}"
            )

        if self.read_timeout <= 0:
            raise ValueError(f"read_timeout must be positive, got {self.read_timeout}")

        if self.max_redirects < 0:
            raise ValueError(f"max_redirects must be >= 0, got {self.max_redirects}")

        if not self.accept:
            raise ValueError("accept must name at least one content type")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["accept"] = list(self.accept)
        return data
