"""
Lazy page sequences.

Each sequence is driven by one background producer (a daemon thread for
PageIterator, an asyncio task for AsyncPageIterator) that fetches pages
and hands them to the consumer through a one-slot queue, so at most one
page is buffered ahead of the consumer.

A sequence ends in one of three ways, reported by ``outcome``:

- EXHAUSTED: the strategy found no next page
- FAILED: a request, status check or decode failed; ``error`` holds the
  exception and no partial page is emitted for the failed call
- CANCELLED: the consumer called close()/aclose() or left the context
  manager before the end

By default a failure simply ends iteration. With ``raise_on_error=True``
the consumer receives ArkPaginationError after the last good page.
"""
import asyncio
import logging
import queue
import threading
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from pydantic import TypeAdapter

from ..client.response import raise_for_status
from ..client.types import ArkResponse
from ..errors import ArkPaginationError
from .page import Page, PaginationOutcome
from .strategies import PageStrategy

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DONE = object()
_PUT_POLL_SECONDS = 0.1

SyncFetch = Callable[[Dict[str, Any]], ArkResponse]
AsyncFetch = Callable[[Dict[str, Any]], Awaitable[ArkResponse]]


class PageDecoder(Generic[T]):
    """Turns one list response into a typed page and the next-page parameters."""

    def __init__(self, name: str, item_type: Type[T], strategy: PageStrategy):
        self.name = name
        self.strategy = strategy
        self._adapter = TypeAdapter(List[item_type])  # type: ignore[valid-type]

    def decode(self, response: ArkResponse) -> Tuple[Page[T], Optional[Dict[str, Any]]]:
        raise_for_status(response, f"fetch page of {self.name}")
        payload = response["data"]
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
        payload = self.strategy.normalize(payload)
        items = self._adapter.validate_python(self.strategy.extract_items(payload))
        return Page(items=items), self.strategy.next_params(payload)


class _PageSequenceState:
    """Outcome bookkeeping shared by the sync and async iterators."""

    def __init__(self, name: str, params: Dict[str, Any], raise_on_error: bool):
        self.name = name
        self._params = dict(params)
        self._raise_on_error = raise_on_error
        self._outcome = PaginationOutcome.RUNNING
        self._error: Optional[BaseException] = None
        self._outcome_lock = threading.Lock()
        self._finished = False

    @property
    def outcome(self) -> PaginationOutcome:
        return self._outcome

    @property
    def error(self) -> Optional[BaseException]:
        """Exception that ended the sequence when the outcome is FAILED."""
        return self._error

    def _finish(self, outcome: PaginationOutcome, error: Optional[BaseException] = None) -> None:
        with self._outcome_lock:
            if self._outcome is not PaginationOutcome.RUNNING:
                return
            self._outcome = outcome
            self._error = error
        if error is not None:
            logger.error(f"Failed to list {self.name}: {error}")
        else:
            logger.debug(f"Listing {self.name} ended: {outcome.value}")

    def _end_of_sequence(self) -> None:
        """Called by the consumer on the end marker."""
        self._finished = True
        if self._outcome is PaginationOutcome.FAILED and self._raise_on_error:
            raise ArkPaginationError(self.name, self._error) from self._error  # type: ignore[arg-type]


class PageIterator(_PageSequenceState, Generic[T]):
    """
    Synchronous lazy page sequence backed by a producer thread.

    Usage:
        with list_pages(client, "api/pool-service/networks", Network) as pages:
            for page in pages:
                ...
        if pages.outcome is PaginationOutcome.FAILED:
            ...
    """

    def __init__(
        self,
        fetch: SyncFetch,
        decoder: PageDecoder[T],
        params: Optional[Dict[str, Any]] = None,
        raise_on_error: bool = False,
    ):
        super().__init__(decoder.name, params or {}, raise_on_error)
        self._fetch = fetch
        self._decoder = decoder
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=1)
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._produce,
            name=f"ark-pages-{self.name}",
            daemon=True,
        )
        self._thread.start()

    def _put(self, item: Any) -> bool:
        while not self._stop.is_set():
            try:
                self._queue.put(item, timeout=_PUT_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def _produce(self) -> None:
        params = dict(self._params)
        try:
            while not self._stop.is_set():
                response = self._fetch(params)
                page, next_params = self._decoder.decode(response)
                if not self._put(page):
                    break
                if next_params is None:
                    self._finish(PaginationOutcome.EXHAUSTED)
                    break
                params.update(next_params)
        except Exception as e:
            self._finish(PaginationOutcome.FAILED, e)
        self._put(_DONE)

    def __iter__(self) -> "PageIterator[T]":
        return self

    def __next__(self) -> Page[T]:
        if self._finished:
            raise StopIteration
        item = self._queue.get()
        if item is _DONE:
            self._end_of_sequence()
            raise StopIteration
        return item

    def close(self) -> None:
        """Stop the producer; pages not yet consumed are dropped."""
        self._finish(PaginationOutcome.CANCELLED)
        self._finished = True
        self._stop.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for the producer thread; True once it has exited."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def __enter__(self) -> "PageIterator[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncPageIterator(_PageSequenceState, Generic[T]):
    """
    Asynchronous lazy page sequence backed by a producer task.

    The task starts on first iteration, so the iterator may be created
    outside a running event loop.
    """

    def __init__(
        self,
        fetch: AsyncFetch,
        decoder: PageDecoder[T],
        params: Optional[Dict[str, Any]] = None,
        raise_on_error: bool = False,
    ):
        super().__init__(decoder.name, params or {}, raise_on_error)
        self._fetch = fetch
        self._decoder = decoder
        self._queue: Optional["asyncio.Queue[Any]"] = None
        self._task: Optional["asyncio.Task[None]"] = None

    def _ensure_started(self) -> "asyncio.Queue[Any]":
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=1)
            self._task = asyncio.get_running_loop().create_task(
                self._produce(self._queue), name=f"ark-pages-{self.name}"
            )
        return self._queue

    async def _produce(self, pages: "asyncio.Queue[Any]") -> None:
        params = dict(self._params)
        try:
            while True:
                response = await self._fetch(params)
                page, next_params = self._decoder.decode(response)
                await pages.put(page)
                if next_params is None:
                    self._finish(PaginationOutcome.EXHAUSTED)
                    break
                params.update(next_params)
        except asyncio.CancelledError:
            self._finish(PaginationOutcome.CANCELLED)
            raise
        except Exception as e:
            self._finish(PaginationOutcome.FAILED, e)
        await pages.put(_DONE)

    def __aiter__(self) -> "AsyncPageIterator[T]":
        return self

    async def __anext__(self) -> Page[T]:
        if self._finished:
            raise StopAsyncIteration
        pages = self._ensure_started()
        item = await pages.get()
        if item is _DONE:
            self._end_of_sequence()
            raise StopAsyncIteration
        return item

    async def aclose(self) -> None:
        """Cancel the producer task and wait for it to exit."""
        self._finish(PaginationOutcome.CANCELLED)
        self._finished = True
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def __aenter__(self) -> "AsyncPageIterator[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
