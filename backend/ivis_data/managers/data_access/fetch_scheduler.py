"""Fetch Scheduler

Coalesces the query descriptors of every request issued within one event
loop iteration into a single network call and fans the flat response out
to all waiting consumers.

Architecture:
- One pending FetchBatch collects descriptors from all enqueuers
- The first enqueue schedules a flush callback on the running loop, two
  iterations out so consumers that await once before enqueueing still join
- aclose() sends a batch that is scheduled but not flushed yet
- The flush swaps in a fresh batch, then posts the old batch's descriptors
- The old batch's future resolves with the flat response (or the error)
"""
import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Set, Tuple

from ivis_data.config import settings
from ivis_data.core.exceptions import ResponseFormatError, TransportError
from ivis_data.logger import logger
from ivis_data.models.queries import QueryDescriptor


class SignalsTransport(Protocol):
    """Anything that can post a batched query body and return the decoded list."""

    async def post(self, endpoint: str, body: List[dict]) -> List[Any]:
        ...


@dataclass
class FetchBatch:
    """Descriptors collected between two flushes plus their shared completion.

    The future is written once (result or exception) and read by every
    consumer that enqueued into this batch.
    """
    batch_id: int
    queries: List[QueryDescriptor] = field(default_factory=list)
    future: Optional[asyncio.Future] = None
    scheduled: bool = False
    flushed: bool = False

    def __len__(self) -> int:
        return len(self.queries)


class FetchScheduler:
    """Batch queries from concurrent consumers into one POST per loop tick.

    Usage:
        scheduler = FetchScheduler(client)
        start_idx, batch = scheduler.enqueue(queries)
        response = await scheduler.wait(batch)
        my_rows = response[start_idx:start_idx + len(queries)]

    Every descriptor enqueued before a flush boundary appears in that flush's
    request, in enqueue order; nothing enqueued after the swap does.
    """

    def __init__(
        self,
        client: SignalsTransport,
        endpoint: Optional[str] = None,
        flush_delay: Optional[float] = None
    ):
        """Initialize scheduler.

        Args:
            client: Transport with async post(endpoint, body)
            endpoint: Query endpoint (default: settings.DATA_ACCESS.signals_query_endpoint)
            flush_delay: Seconds to wait before flushing (default: settings, 0 = two loop iterations)
        """
        self.client = client
        self.endpoint = endpoint or settings.DATA_ACCESS.signals_query_endpoint
        self.flush_delay = (
            settings.DATA_ACCESS.flush_delay_seconds if flush_delay is None else flush_delay
        )

        self._batch_ids = itertools.count(1)
        self._batch = self._new_batch()
        self._in_flight: Set[asyncio.Task] = set()
        self._flush_count = 0

    def _new_batch(self) -> FetchBatch:
        return FetchBatch(batch_id=next(self._batch_ids))

    @property
    def pending_count(self) -> int:
        """Descriptors waiting for the next flush."""
        return len(self._batch.queries)

    @property
    def in_flight(self) -> int:
        """Flushed batches whose network call has not completed yet."""
        return len(self._in_flight)

    @property
    def flush_count(self) -> int:
        return self._flush_count

    def enqueue(self, queries: List[QueryDescriptor]) -> Tuple[int, FetchBatch]:
        """Append queries to the pending batch.

        Must be called from within a running event loop.

        Returns:
            (start index of these queries in the batch response, the batch)
        """
        loop = asyncio.get_running_loop()
        batch = self._batch

        if batch.future is None:
            batch.future = loop.create_future()

        start_idx = len(batch.queries)
        batch.queries.extend(queries)

        if not batch.scheduled:
            batch.scheduled = True
            if self.flush_delay > 0:
                loop.call_later(self.flush_delay, self._flush, batch)
            else:
                loop.call_soon(loop.call_soon, self._flush, batch)

        logger.debug(
            f"Enqueued {len(queries)} queries into batch #{batch.batch_id} at offset {start_idx}"
        )
        return start_idx, batch

    async def wait(self, batch: FetchBatch) -> List[Any]:
        """Wait for the flat response of a batch.

        Shielded: cancelling one waiter does not cancel the batch for the others.

        Raises:
            TransportError: If the batched call failed
        """
        return await asyncio.shield(batch.future)

    def _flush(self, batch: FetchBatch) -> None:
        """Swap in a fresh batch and send the old one."""
        if batch.flushed:
            return
        if batch is self._batch:
            self._batch = self._new_batch()
        batch.flushed = True
        self._flush_count += 1

        logger.debug(f"Flushing batch #{batch.batch_id} ({len(batch)} queries)")

        task = asyncio.get_running_loop().create_task(self._execute(batch))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _execute(self, batch: FetchBatch) -> None:
        body = [query.to_wire() for query in batch.queries]

        try:
            response = await self.client.post(self.endpoint, body)

            if not isinstance(response, list):
                raise ResponseFormatError(
                    f"Expected a list response, got {type(response).__name__}"
                )
            if len(response) != len(body):
                raise ResponseFormatError(
                    f"Response has {len(response)} entries for {len(body)} queries"
                )

        except TransportError as exc:
            logger.error(f"Batch #{batch.batch_id} failed: {exc}")
            self._reject(batch, exc)
            return

        except Exception as exc:
            logger.error(f"Batch #{batch.batch_id} failed with unexpected error: {exc!r}")
            error = TransportError(f"Signals query failed: {exc}")
            error.__cause__ = exc
            self._reject(batch, error)
            return

        logger.info(f"Batch #{batch.batch_id} completed ({len(response)} results)")
        if not batch.future.done():
            batch.future.set_result(response)

    @staticmethod
    def _reject(batch: FetchBatch, error: TransportError) -> None:
        if not batch.future.done():
            batch.future.set_exception(error)

    async def aclose(self) -> None:
        """Send the pending batch, if any, and wait for in-flight batches to complete."""
        pending = self._batch
        if pending.scheduled and not pending.flushed:
            logger.debug(f"Flushing pending batch #{pending.batch_id} on close")
            self._flush(pending)

        if self._in_flight:
            logger.debug(f"Waiting for {len(self._in_flight)} in-flight batches")
            await asyncio.gather(*self._in_flight, return_exceptions=True)
