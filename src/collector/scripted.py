from __future__ import annotations

import asyncio
from dataclasses import dataclass

from collector.countries_service import CountriesService
from collector.errors import CountriesError, DecodingFailureError, EmptyResponseError, InvalidDataError
from collector.transport import TransportResponse
from transforms.countries import Country, ParseResult


MOCK_ENDPOINT = "https://mock.url"


@dataclass(frozen=True)
class TransportStep:
    content: bytes | None = b"[]"
    error: BaseException | None = None
    delay: float = 0.0


class ScriptedTransport:
    """
    Canned transport for tests and demos.

    Each `fetch` consumes the next step (the last one repeats). A step either
    raises `error` or returns `content`, after sleeping `delay` seconds.
    """

    def __init__(self, *steps: TransportStep) -> None:
        self._steps = list(steps) or [TransportStep()]
        self.calls: list[str] = []

    async def fetch(self, url: str) -> TransportResponse:
        # Pick the step before suspending so steps map to calls in call order.
        step = self._steps.pop(0) if len(self._steps) > 1 else self._steps[0]
        self.calls.append(url)

        if step.delay > 0:
            await asyncio.sleep(step.delay)
        if step.error is not None:
            raise step.error
        return TransportResponse(content=step.content)


class ScriptedParser:
    def __init__(self, result: ParseResult | None = None) -> None:
        self.result = result or ParseResult.success([])
        self.calls: list[bytes | str | None] = []

    def parse(self, payload: bytes | str | None) -> ParseResult:
        self.calls.append(payload)
        return self.result


def mock_service(countries: list[Country]) -> CountriesService:
    return CountriesService(
        MOCK_ENDPOINT,
        transport=ScriptedTransport(),
        parser=ScriptedParser(ParseResult.success(countries)),
    )


def failing_service(error: CountriesError | None = None) -> CountriesService:
    return CountriesService(
        MOCK_ENDPOINT,
        transport=ScriptedTransport(),
        parser=ScriptedParser(ParseResult.failure(error or DecodingFailureError())),
    )


def empty_result_service() -> CountriesService:
    # Zero countries is a successful fetch.
    return mock_service([])


def invalid_data_service() -> CountriesService:
    return CountriesService(MOCK_ENDPOINT, transport=ScriptedTransport(TransportStep(error=InvalidDataError())))


def empty_response_service() -> CountriesService:
    # Transport answered, but the payload is flagged as logically empty.
    return CountriesService(MOCK_ENDPOINT, transport=ScriptedTransport(TransportStep(error=EmptyResponseError())))
