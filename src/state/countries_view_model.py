from __future__ import annotations

import asyncio

from collector.countries_service import CountriesFetcher, CountriesService
from state.observable import CurrentValue
from transforms.countries import Country, filter_countries
from utils.logging import get_logger


logger = get_logger(component="countries_view_model")


class CountriesViewModel:
    """
    Observable countries state for a presentation layer.

    - `countries`: last successfully fetched list (initially [])
    - `last_error`: last refresh failure (initially None); a later success does
      not clear it
    - `refresh_countries()` is fire-and-forget and may overlap with itself;
      results publish in completion order (last write wins)
    - all publication happens on the bound event loop: the one passed as
      `loop=`, else the loop running at the first `refresh_countries()`.
      Synchronous callers with no running loop must pass `loop=`.
    """

    def __init__(
        self,
        service: CountriesFetcher | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._service = service or CountriesService()
        self._loop = loop
        self._tasks: set[asyncio.Task] = set()

        self.countries: CurrentValue[list[Country]] = CurrentValue([])
        self.last_error: CurrentValue[Exception | None] = CurrentValue(None)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def refresh_countries(self) -> None:
        """
        Start one refresh. Must be called on the bound loop, or from another
        thread once the view model is bound (via `loop=` or a prior call).
        """
        loop = self._bound_loop()
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            self._start()
        else:
            loop.call_soon_threadsafe(self._start)

    async def wait_idle(self) -> None:
        """Wait until every in-flight refresh has published its result."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        # Publishes are queued with call_soon_threadsafe; let them drain.
        await asyncio.sleep(0)

    def filtered(self, search_text: str | None) -> list[Country]:
        return filter_countries(self.countries.value, search_text)

    def _bound_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise RuntimeError(
                    "CountriesViewModel has no event loop to publish on: "
                    "call refresh_countries() from a running loop or pass loop= when constructing it"
                ) from e
        return self._loop

    def _start(self) -> None:
        task = self._bound_loop().create_task(self._refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _refresh(self) -> None:
        try:
            countries = await self._service.fetch_countries()
        except Exception as e:
            logger.info("refresh_failed", error_kind=type(e).__name__, err=str(e))
            self._publish(self.last_error, e)
        else:
            logger.info("refresh_ok", count=len(countries))
            self._publish(self.countries, countries)

    def _publish(self, subject: CurrentValue, value: object) -> None:
        self._bound_loop().call_soon_threadsafe(subject.send, value)
