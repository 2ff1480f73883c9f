"""Pull cursor over the ruamel.yaml event stream with position tracking."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError
from ruamel.yaml.events import (
    AliasEvent,
    CollectionEndEvent,
    CollectionStartEvent,
    DocumentEndEvent,
    DocumentStartEvent,
    Event,
    MappingEndEvent,
    MappingStartEvent,
    ScalarEvent,
    SequenceEndEvent,
    SequenceStartEvent,
    StreamEndEvent,
    StreamStartEvent,
)

from yamlshape.models.errors import (
    EarlyTerminationError,
    LimitExceededError,
    ScanError,
    SourceSpan,
    UnexpectedElementError,
)
from yamlshape.settings import Settings, get_settings

logger = logging.getLogger("yamlshape.parser")

Positioned = tuple[Event, SourceSpan]


def describe_event(event: Event) -> str:
    """Short, stable name for an event (``Scalar('foo')``, ``MappingStart``)."""
    name = type(event).__name__.removesuffix("Event")
    if isinstance(event, ScalarEvent):
        return f"{name}({event.value!r})"
    if isinstance(event, AliasEvent):
        return f"{name}(*{event.anchor})"
    return name


def span_of(event: Event, filename: str) -> SourceSpan:
    start, end = event.start_mark, event.end_mark
    if start is None:
        return SourceSpan(file=filename, line=1, column=1)
    return SourceSpan(
        file=filename,
        line=start.line + 1,
        column=start.column + 1,
        end_line=end.line + 1 if end is not None else None,
        end_column=end.column + 1 if end is not None else None,
    )


class EventCursor:
    """Stateful wrapper around one ruamel.yaml event stream.

    ``peek`` never raises: a malformed token is buffered and surfaces as a
    ``ScanError`` only when ``next`` consumes it.  The cursor also counts
    collection nesting and enforces ``max_depth``.
    """

    def __init__(
        self,
        events: Iterator[Event],
        *,
        filename: str = "<string>",
        max_depth: int = 64,
    ) -> None:
        self._events = events
        self._filename = filename
        self._max_depth = max_depth
        self._depth = 0
        self._buffer: list[Positioned | Exception] = []
        self._exhausted = False
        self._seen_document = False

    @classmethod
    def from_string(
        cls,
        content: str,
        filename: str = "<string>",
        settings: Settings | None = None,
    ) -> EventCursor:
        """Open a cursor over ``content`` after the pre-parse size check."""
        settings = settings or get_settings()
        if len(content) > settings.max_document_size:
            logger.warning("rejecting %s: %d chars", filename, len(content))
            raise LimitExceededError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {settings.max_document_size:,} limit)"
            )
        yaml = YAML(typ="safe", pure=True)
        return cls(yaml.parse(content), filename=filename, max_depth=settings.max_depth)

    # -- buffering -----------------------------------------------------------

    def _pull(self) -> Positioned | Exception | None:
        """Fetch one item from the underlying generator (event or error)."""
        if self._exhausted:
            return None
        try:
            event = next(self._events)
        except StopIteration:
            self._exhausted = True
            return None
        except YAMLError as exc:
            self._exhausted = True
            return exc
        if isinstance(event, DocumentStartEvent):
            self._seen_document = True
        elif isinstance(event, StreamEndEvent) and not self._seen_document:
            # No document at all: present one implicit empty scalar document.
            self._seen_document = True
            span = span_of(event, self._filename)
            start, end = event.start_mark, event.end_mark
            self._buffer.extend(
                [
                    (ScalarEvent(None, None, (True, False), "", start, end), span),
                    (DocumentEndEvent(event.start_mark, event.end_mark), span),
                    (event, span),
                ]
            )
            return (DocumentStartEvent(event.start_mark, event.end_mark), span)
        return (event, span_of(event, self._filename))

    def _fill(self) -> Positioned | Exception | None:
        if not self._buffer:
            item = self._pull()
            if item is None:
                return None
            self._buffer.insert(0, item)
        return self._buffer[0]

    def peek(self) -> Positioned | None:
        """Return the next event without consuming it, or None."""
        item = self._fill()
        if item is None or isinstance(item, Exception):
            return None
        return item

    def peek_event(self) -> Event | None:
        item = self.peek()
        return item[0] if item is not None else None

    def next(self) -> Positioned:
        """Consume the next event."""
        item = self._fill()
        if item is None:
            raise EarlyTerminationError()
        self._buffer.pop(0)
        if isinstance(item, Exception):
            raise self._scan_error(item) from item
        event, span = item
        logger.debug("next: %s at %s", describe_event(event), span.describe())
        self._track_depth(event, span)
        return item

    def _scan_error(self, exc: Exception) -> ScanError:
        span = None
        if isinstance(exc, MarkedYAMLError):
            mark = exc.problem_mark or exc.context_mark
            if mark is not None:
                span = SourceSpan(file=self._filename, line=mark.line + 1, column=mark.column + 1)
        return ScanError(exc, span)

    def _track_depth(self, event: Event, span: SourceSpan) -> None:
        if isinstance(event, CollectionStartEvent):
            self._depth += 1
            if self._depth > self._max_depth:
                logger.warning("nesting depth %d exceeded at %s", self._max_depth, span.describe())
                raise LimitExceededError(
                    f"YAML nesting exceeds maximum depth ({self._max_depth})", span
                )
        elif isinstance(event, CollectionEndEvent):
            self._depth -= 1

    # -- structural assertions -----------------------------------------------

    def _expect(self, kind: type[Event], location: str) -> Positioned:
        event, span = self.next()
        if not isinstance(event, kind):
            raise UnexpectedElementError(describe_event(event), span, location)
        return event, span

    def expect_stream_start(self, location: str) -> None:
        self._expect(StreamStartEvent, location)

    def expect_stream_end(self, location: str) -> None:
        self._expect(StreamEndEvent, location)

    def expect_document_start(self, location: str) -> None:
        self._expect(DocumentStartEvent, location)

    def expect_document_end(self, location: str) -> None:
        self._expect(DocumentEndEvent, location)

    def expect_sequence_start(self, location: str) -> SourceSpan:
        return self._expect(SequenceStartEvent, location)[1]

    def expect_sequence_end(self, location: str) -> None:
        self._expect(SequenceEndEvent, location)

    def expect_mapping_start(self, location: str) -> SourceSpan:
        return self._expect(MappingStartEvent, location)[1]

    def expect_mapping_end(self, location: str) -> None:
        self._expect(MappingEndEvent, location)

    def expect_scalar(self, location: str) -> tuple[str, SourceSpan]:
        event, span = self._expect(ScalarEvent, location)
        return event.value, span

    # -- skipping ------------------------------------------------------------

    def skip_node(self) -> None:
        """Consume one complete node: a scalar, an alias or a whole collection."""
        event, span = self.next()
        if isinstance(event, (ScalarEvent, AliasEvent)):
            return
        if not isinstance(event, CollectionStartEvent):
            raise UnexpectedElementError(describe_event(event), span, "skip_node")
        self._consume_until(type(event))

    def consume_to_mapping_end(self) -> None:
        """Discard the rest of the open mapping, including its end marker."""
        self._consume_until(MappingStartEvent)

    def consume_to_sequence_end(self) -> None:
        """Discard the rest of the open sequence, including its end marker."""
        self._consume_until(SequenceStartEvent)

    def _consume_until(self, opened: type[Any]) -> None:
        closing = MappingEndEvent if opened is MappingStartEvent else SequenceEndEvent
        depth = 1
        while depth:
            event, span = self.next()
            if isinstance(event, CollectionStartEvent):
                depth += 1
            elif isinstance(event, CollectionEndEvent):
                depth -= 1
                if depth == 0 and not isinstance(event, closing):
                    raise UnexpectedElementError(describe_event(event), span, "consume_to_end")
            elif isinstance(event, (DocumentEndEvent, StreamEndEvent)):
                raise UnexpectedElementError(describe_event(event), span, "consume_to_end")
