"""Content-negotiated retrieval of DOI metadata documents."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from doimeta.config import ResolverConfig
from doimeta.content_types import CSL_JSON, UNIXREF_XML
from doimeta.errors import ContentTypeMismatch, NoBackendConfigured
from doimeta.identifier import Doi
from doimeta.parse.base import decode_source
from doimeta.retrieve.transport import BACKENDS, Transport

__all__ = ["REDIRECT_CODES", "RetrievalResult", "Retriever"]

REDIRECT_CODES = frozenset({301, 302, 303})


@dataclass(frozen=True)
class RetrievalResult:
    """Outcome of one metadata lookup.

    Attributes
    ----------
    doi : str
        Normalized DOI that was looked up.
    found : bool
        True when the resolver answered 200.
    status_code : int
        HTTP status of the final response.
    body : bytes
        Metadata document; empty when not found.
    content_type : str | None
        Content type of the final response; None when not found.
    url : str | None
        URL the final response came from.
    """

    doi: str
    found: bool
    status_code: int
    body: bytes = b""
    content_type: str | None = None
    url: str | None = None

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return decode_source(self.body)


class Retriever:
    """Resolves DOIs to metadata documents through a pluggable transport.

    Attributes
    ----------
    config : ResolverConfig
        Resolver settings.
    transport : Transport | None
        Selected transport, or None until a backend is chosen.
    """

    def __init__(
        self,
        config: ResolverConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialize retriever.

        Parameters
        ----------
        config : ResolverConfig | None, optional
            Resolver settings; defaults apply when omitted.
        transport : Transport | None, optional
            Explicit transport. When omitted, the backend named in
            ``config.backend`` is instantiated (if any).
        """
        self.config = config or ResolverConfig()
        self.transport: Transport | None = transport

        if self.transport is None and self.config.backend is not None:
            self.use_backend(self.config.backend)

    def __enter__(self) -> "Retriever":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close transport."""
        self.close()

    def close(self) -> None:
        """Close the selected transport, if any."""
        if self.transport is not None:
            self.transport.close()

    def use_backend(self, name: str) -> None:
        """Select a transport backend by name.

        Parameters
        ----------
        name : str
            Key in ``BACKENDS``.

        Raises
        ------
        ValueError
            If no backend is registered under ``name``.
        """
        factory = BACKENDS.get(name)
        if factory is None:
            supported = ", ".join(repr(b) for b in sorted(BACKENDS))
            raise ValueError(f"Unknown transport backend {name!r}; supported: {supported}")
        self.transport = factory(self.config)

    def _require_transport(self) -> Transport:
        if self.transport is None:
            raise NoBackendConfigured()
        return self.transport

    def _doi(self, doi: Doi | str) -> Doi:
        if isinstance(doi, Doi):
            return doi
        return Doi.parse(doi, resolver_domain=self.config.resolver_domain)

    def resolver_url(self, doi: Doi | str) -> str:
        """Resolver URL for ``doi`` under the configured domain.

        Raises
        ------
        InvalidIdentifier
            If ``doi`` is not a valid DOI.
        """
        return self._doi(doi).resolver_url(self.config.resolver_domain)

    def retrieve(
        self,
        doi: Doi | str,
        accepted_content_types: Sequence[str] | str | None = None,
    ) -> RetrievalResult:
        """Fetch the metadata document for a DOI.

        Parameters
        ----------
        doi : Doi | str
            DOI, ``doi:`` URI or resolver URL.
        accepted_content_types : Sequence[str] | str | None, optional
            Content types in preference order; ``config.accept`` when omitted.

        Returns
        -------
        RetrievalResult
            Found result with body and content type on 200, otherwise a
            not-found result with an empty body.

        Raises
        ------
        NoBackendConfigured
            If no transport is selected.
        InvalidIdentifier
            If ``doi`` is not a valid DOI.
        ContentTypeMismatch
            If a 200 response is neither JSON nor XML.
        TransportError
            If the request fails before a response arrives.
        """
        transport = self._require_transport()
        parsed = self._doi(doi)

        if accepted_content_types is None:
            accepted_content_types = self.config.accept
        elif isinstance(accepted_content_types, str):
            accepted_content_types = [accepted_content_types]

        response = transport.get(
            parsed.resolver_url(self.config.resolver_domain),
            headers={"Accept": ", ".join(accepted_content_types)},
            follow_redirects=True,
        )

        if response.status_code != 200:
            return RetrievalResult(
                doi=parsed.value,
                found=False,
                status_code=response.status_code,
                url=response.url,
            )

        # Some publishers ignore content negotiation and serve an HTML landing page.
        content_type = response.content_type or ""
        if "json" not in content_type.lower() and "xml" not in content_type.lower():
            raise ContentTypeMismatch(response.content_type, response.url)

        return RetrievalResult(
            doi=parsed.value,
            found=True,
            status_code=response.status_code,
            body=response.body,
            content_type=response.content_type,
            url=response.url,
        )

    def resolve_target(self, doi: Doi | str) -> str | None:
        """Return the URL the resolver redirects ``doi`` to.

        Only the first hop is inspected; the redirect is not followed.

        Parameters
        ----------
        doi : Doi | str
            DOI, ``doi:`` URI or resolver URL.

        Returns
        -------
        str | None
            ``Location`` of a 301/302/303 response, otherwise None.

        Raises
        ------
        NoBackendConfigured
            If no transport is selected.
        InvalidIdentifier
            If ``doi`` is not a valid DOI.
        TransportError
            If the request fails before a response arrives.
        """
        transport = self._require_transport()
        parsed = self._doi(doi)

        response = transport.get(
            parsed.resolver_url(self.config.resolver_domain),
            headers={},
            follow_redirects=False,
        )
        if response.status_code in REDIRECT_CODES:
            return response.location
        return None

    def lookup_xml(self, doi: Doi | str) -> str | None:
        """UnixRef XML text for ``doi``, or None when not found."""
        result = self.retrieve(doi, [UNIXREF_XML])
        return result.text if result.found else None

    def lookup_json(self, doi: Doi | str) -> dict[str, Any] | None:
        """Decoded CSL-JSON object for ``doi``, or None when not found.

        Raises
        ------
        json.JSONDecodeError
            If the resolver returns a body that is not JSON.
        """
        result = self.retrieve(doi, [CSL_JSON])
        return json.loads(result.text) if result.found else None
