"""Incremental story stream.

A run fetches the new-story id list, then fetches each item in list order and
pushes it into a StreamSink, either as the raw upstream JSON or rendered as
HTML, until max_stories items have been emitted or the ids run out.

Usage:
    async with create_story_stream(5, "json") as stream:
        async for chunk in stream:
            ...
"""

import asyncio
import logging
from numbers import Real

import httpx

from hnstream.config import DEFAULT_CONFIG, RequestConfig
from hnstream.errors import ConfigurationError
from hnstream.models import OutputMode, PipelineState, RunState
from hnstream.render import htmlify
from hnstream.sources import fetch_item, fetch_story_ids

logger = logging.getLogger(__name__)

SINK_MAXSIZE = 16

_END = object()


class _Failure:
    __slots__ = ("exc",)

    def __init__(self, exc: BaseException):
        self.exc = exc


class StreamSink:
    """Bounded push channel closed by exactly one end() or error()."""

    def __init__(self, maxsize: int = SINK_MAXSIZE):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize)
        self._closed = False
        self._drained = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def push(self, chunk: str) -> None:
        if self._closed:
            raise RuntimeError("Cannot push to a closed sink")
        await self._queue.put(chunk)

    async def end(self) -> None:
        await self._terminate(_END)

    async def error(self, exc: BaseException) -> None:
        await self._terminate(_Failure(exc))

    async def _terminate(self, marker) -> None:
        if self._closed:
            raise RuntimeError("Sink already closed")
        self._closed = True
        await self._queue.put(marker)

    def close(self) -> None:
        """Abandon the sink from the reading side; iteration stops at once."""
        self._closed = True
        self._drained = True
        if not self._queue.full():
            # Wakes a reader already waiting on get()
            self._queue.put_nowait(_END)

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        if self._drained:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END:
            self._drained = True
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            self._drained = True
            raise item.exc
        return item


async def _hydrate(
    sink: StreamSink,
    client: httpx.AsyncClient,
    config: RequestConfig,
    mode: OutputMode,
    state: PipelineState,
) -> None:
    state.state = RunState.LIST_FETCHING
    story_ids = await fetch_story_ids(client, config)

    as_json = mode is OutputMode.JSON
    separator = ""
    if as_json:
        await sink.push("[")

    for story_id in story_ids:
        state.state = RunState.ITEM_FETCHING
        state.attempted += 1
        body = await fetch_item(client, config, story_id)
        if body is None:
            continue

        state.state = RunState.EMITTING
        if as_json:
            # Upstream text goes out untouched
            await sink.push(separator + body)
            separator = ","
        else:
            await sink.push(htmlify(body))
        state.emitted += 1
        state.remaining -= 1
        if state.remaining <= 0:
            break

    if as_json:
        await sink.push("]")


async def run(
    sink: StreamSink,
    max_stories: Real,
    mode: OutputMode,
    *,
    client: httpx.AsyncClient | None = None,
    config: RequestConfig = DEFAULT_CONFIG,
    state: PipelineState | None = None,
) -> None:
    """Fill the sink with up to max_stories stories, then end it.

    Any failure other than a skipped item is delivered through sink.error()
    instead of being raised. A client passed in is left open.
    """
    if state is None:
        state = PipelineState(remaining=max_stories)
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.timeout) as own_client:
                await _hydrate(sink, own_client, config, mode, state)
        else:
            await _hydrate(sink, client, config, mode, state)
    except Exception as exc:
        state.state = RunState.FAILED
        logger.exception("Story stream failed after %d stories", state.emitted)
        await sink.error(exc)
        return

    state.state = RunState.COMPLETED
    logger.info(
        "Story stream complete: %d stories from %d ids", state.emitted, state.attempted,
    )
    await sink.end()


class StoryStream:
    """Async iterator over the chunks of one run.

    The run starts on first iteration. Leaving the stream early should go
    through aclose() (or ``async with``), which cancels a producer blocked on
    a full sink and ends iteration.
    """

    def __init__(
        self,
        max_stories: Real,
        mode: OutputMode,
        *,
        client: httpx.AsyncClient | None = None,
        config: RequestConfig = DEFAULT_CONFIG,
    ):
        self.max_stories = max_stories
        self.mode = mode
        self._client = client
        self._config = config
        self._sink = StreamSink()
        self._pipeline = PipelineState(remaining=max_stories)
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> RunState:
        return self._pipeline.state

    @property
    def emitted(self) -> int:
        return self._pipeline.emitted

    def _start(self) -> None:
        if self._task is None and not self._sink.closed:
            self._task = asyncio.create_task(
                run(
                    self._sink,
                    self.max_stories,
                    self.mode,
                    client=self._client,
                    config=self._config,
                    state=self._pipeline,
                )
            )

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        self._start()
        return await self._sink.__anext__()

    async def read(self) -> str:
        """Drain the stream into a single string."""
        return "".join([chunk async for chunk in self])

    async def aclose(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
        self._sink.close()
        if not self._pipeline.state.is_terminal:
            self._pipeline.state = RunState.FAILED

    async def __aenter__(self) -> "StoryStream":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_story_stream(
    max_stories: Real = 10,
    output: str = "html",
    *,
    client: httpx.AsyncClient | None = None,
    config: RequestConfig = DEFAULT_CONFIG,
) -> StoryStream:
    """Validate the arguments and return a stream of the newest stories.

    No network I/O happens here. Invalid arguments raise ConfigurationError
    immediately; every later failure surfaces while iterating the stream.
    """
    mode = OutputMode.parse(output)
    if isinstance(max_stories, bool) or not isinstance(max_stories, Real) or not max_stories > 0:
        raise ConfigurationError("max parameter must be greater than 0")
    return StoryStream(max_stories, mode, client=client, config=config)
