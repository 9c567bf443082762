from __future__ import annotations

import asyncio
from typing import Protocol

import httpx

from collector.errors import CountriesError, InvalidURLError, TransportFailureError
from collector.transport import HttpxTransport, Transport
from transforms.countries import CountriesParser, Country, Parser
from utils.config import DEFAULT_ENDPOINT, CountriesConfig
from utils.logging import get_logger


logger = get_logger(component="countries_service")


class CountriesFetcher(Protocol):
    async def fetch_countries(self) -> list[Country]: ...


def _validate_url(endpoint: str) -> str:
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise InvalidURLError(endpoint) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(endpoint)
    return endpoint


class CountriesService:
    """
    Countries fetch service
    - one configured endpoint, one request per call (no retry, no cache)
    - transport and parser are injectable (scripted doubles in tests)
    - every failure surfaces as a CountriesError subclass
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        *,
        transport: Transport | None = None,
        parser: Parser | None = None,
        owns_transport: bool | None = None,
    ) -> None:
        self._endpoint = endpoint
        # A transport we create is always ours to close; an injected one only when asked.
        self._owns_transport = transport is None if owns_transport is None else owns_transport
        self._transport: Transport = transport or HttpxTransport()
        self._parser: Parser = parser or CountriesParser()

    @classmethod
    def from_config(cls, config: CountriesConfig) -> CountriesService:
        return cls(
            config.endpoint,
            transport=HttpxTransport(timeout_seconds=config.timeout_seconds),
            owns_transport=True,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def aclose(self) -> None:
        close = getattr(self._transport, "aclose", None)
        if self._owns_transport and close is not None:
            await close()

    async def __aenter__(self) -> CountriesService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def fetch_countries(self) -> list[Country]:
        url = _validate_url(self._endpoint)
        logger.info("countries_fetch_start", url=url)

        try:
            response = await self._transport.fetch(url)
        except CountriesError as e:
            logger.warning("countries_fetch_failed", url=url, error_kind=type(e).__name__, err=str(e))
            raise
        except Exception as e:
            logger.warning("countries_fetch_failed", url=url, error_kind="TransportFailureError", err=str(e))
            raise TransportFailureError(e) from e

        result = await asyncio.to_thread(self._parser.parse, response.content)
        if not result.ok:
            logger.warning("countries_fetch_failed", url=url, error_kind=type(result.error).__name__)
            raise result.error

        countries = result.countries or []
        logger.info("countries_fetch_ok", url=url, count=len(countries))
        return countries
