"""Feed output: sinks, records and the line writer.

The writer follows a small state machine:

    IDLE ──open (header due)──► HEADER_EMITTED ──write──► STREAMING
      │                              │                        │
      └──open (no header)────────────┴──────► STREAMING       │ close
                                                              ▼
                                                            DONE

Every line handed to the sink is followed by a flush, so a long feed
reaches the consumer record by record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Protocol

from catalogfeed.domain.exceptions import InvalidStateTransitionError
from catalogfeed.feed.config import FeedConfig

IN_STOCK = "in stock"
OUT_OF_STOCK = "out of stock"


# ============================================================================
# Sinks
# ============================================================================


class FeedSink(Protocol):
    """Destination of encoded feed lines."""

    def write(self, data: bytes) -> None:
        """Buffer data for output."""
        ...

    def flush(self) -> None:
        """Push buffered data to the consumer."""
        ...


class StreamSink:
    """Sink writing to a binary stream such as a file or stdout."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream

    def write(self, data: bytes) -> None:
        self.stream.write(data)

    def flush(self) -> None:
        self.stream.flush()


class ChunkSink:
    """Sink collecting flushed chunks for an async response body.

    Data written since the last flush stays pending; ``drain`` hands out
    only flushed chunks.
    """

    def __init__(self) -> None:
        self._pending = bytearray()
        self._ready: list[bytes] = []

    def write(self, data: bytes) -> None:
        self._pending.extend(data)

    def flush(self) -> None:
        if self._pending:
            self._ready.append(bytes(self._pending))
            self._pending.clear()

    def drain(self) -> list[bytes]:
        """Take all flushed chunks.

        Returns:
            Chunks in the order they were flushed.
        """
        ready, self._ready = self._ready, []
        return ready


# ============================================================================
# Records
# ============================================================================


@dataclass(frozen=True)
class FeedRecord:
    """One product line of the feed, already cleaned.

    Attributes follow the output column order; price fields are empty
    strings when the price is absent.
    """

    id: str
    title: str
    link: str
    description: str
    image_link: str
    categories: str
    availability: str
    brand: str
    mpn: str
    price: str
    sale_price: str
    extra_title_1: str
    extra_title_2: str

    def fields(self, include_prices: bool = True) -> list[str]:
        """Get field values in column order.

        Args:
            include_prices: Whether price and sale_price are part of the feed.

        Returns:
            List of field values.
        """
        values = [
            self.id,
            self.title,
            self.link,
            self.description,
            self.image_link,
            self.categories,
            self.availability,
            self.brand,
            self.mpn,
        ]
        if include_prices:
            values += [self.price, self.sale_price]
        values += [self.extra_title_1, self.extra_title_2]
        return values


# ============================================================================
# Writer
# ============================================================================


class WriterState(str, Enum):
    """Feed writer lifecycle states."""

    IDLE = "idle"
    HEADER_EMITTED = "header_emitted"
    STREAMING = "streaming"
    DONE = "done"

    def can_transition_to(self, target: "WriterState") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _WRITER_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["WriterState"]:
        """Get list of valid target states."""
        return list(_WRITER_TRANSITIONS.get(self, set()))


_WRITER_TRANSITIONS: dict[WriterState, set[WriterState]] = {
    WriterState.IDLE: {WriterState.HEADER_EMITTED, WriterState.STREAMING},
    WriterState.HEADER_EMITTED: {WriterState.STREAMING, WriterState.DONE},
    WriterState.STREAMING: {WriterState.STREAMING, WriterState.DONE},
    WriterState.DONE: set(),
}


class FeedWriter:
    """Writes the header and product records of one feed to a sink.

    Example usage:
        writer = FeedWriter(config, StreamSink(sys.stdout.buffer))
        writer.open()
        writer.write_record(record)
        writer.close()
    """

    def __init__(self, config: FeedConfig, sink: FeedSink) -> None:
        """Initialize writer.

        Args:
            config: Feed configuration (columns, separator, charset).
            sink: Destination of encoded lines.
        """
        self.config = config
        self.sink = sink
        self.state = WriterState.IDLE
        self.records_written = 0

    def _transition(self, target: WriterState) -> None:
        if not self.state.can_transition_to(target):
            raise InvalidStateTransitionError(
                entity_type="FeedWriter",
                current_state=self.state.value,
                target_state=target.value,
                allowed_transitions=[s.value for s in self.state.allowed_transitions()],
            )
        self.state = target

    def _emit(self, fields: list[str]) -> None:
        line = self.config.field_separator.join(fields) + "\n"
        self.sink.write(line.encode(self.config.charset.codec, errors="replace"))
        self.sink.flush()

    def render_header(self) -> list[str]:
        """Get header field names for the configured columns."""
        return list(self.config.columns)

    def open(self) -> bool:
        """Start the feed, writing the header when it is due.

        Returns:
            True if a header line was written.
        """
        if self.config.emits_header:
            self._transition(WriterState.HEADER_EMITTED)
            self._emit(self.render_header())
            return True
        self._transition(WriterState.STREAMING)
        return False

    def write_record(self, record: FeedRecord) -> None:
        """Write one product line.

        Args:
            record: Cleaned record.

        Raises:
            InvalidStateTransitionError: If the writer was not opened or is closed.
        """
        if self.state is WriterState.IDLE:
            raise InvalidStateTransitionError(
                entity_type="FeedWriter",
                current_state=self.state.value,
                target_state=WriterState.STREAMING.value,
                allowed_transitions=["open"],
            )
        self._transition(WriterState.STREAMING)
        self._emit(record.fields(self.config.show_prices))
        self.records_written += 1

    def close(self) -> None:
        """Finish the feed."""
        self._transition(WriterState.DONE)
