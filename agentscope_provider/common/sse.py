"""
Server-Sent Events Decoding

Splits an upstream text/event-stream byte stream into discrete events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterable, AsyncIterator, Optional

UTF8_BOM = b"\xef\xbb\xbf"


@dataclass(frozen=True)
class SSEEvent:
    """One dispatched SSE record."""

    event: Optional[str]
    data: str
    id: Optional[str] = None


class SSEDecoder:
    """
    Incremental SSE Decoder: Splits bytes stream into event blocks and extracts event/data fields.

    - Uses empty line (\\n\\n) as event boundary
    - Supports CRLF (\\r\\n) and bare CR line endings
    - A leading UTF-8 byte order mark is dropped
    - Multiple data: lines of one event are joined with \\n
    - Comment lines (starting with ':') and unknown fields are ignored
    """

    def __init__(self) -> None:
        self._buf = b""
        self._first = True

    def feed(self, chunk: bytes) -> list[SSEEvent]:
        """
        Append bytes and return the list of events completed by them.
        """
        if not chunk:
            return []

        data = self._buf + chunk
        if self._first:
            # The BOM itself may arrive split across chunks
            if len(data) < len(UTF8_BOM) and UTF8_BOM.startswith(data):
                self._buf = data
                return []
            self._first = False
            if data.startswith(UTF8_BOM):
                data = data[len(UTF8_BOM):]

        # A trailing CR may be the first half of a CRLF split across chunks
        held = b""
        if data.endswith(b"\r"):
            data, held = data[:-1], b"\r"
        data = data.replace(b"\r\n", b"\n").replace(b"\r", b"\n")

        parts = data.split(b"\n\n")
        self._buf = parts.pop() + held  # Keep last incomplete event

        events: list[SSEEvent] = []
        for block in parts:
            event = self._parse_block(block)
            if event is not None:
                events.append(event)
        return events

    def close(self) -> list[SSEEvent]:
        """
        Flush the buffer at end of stream, dispatching a final unterminated event.
        """
        block = self._buf.replace(b"\r\n", b"\n").replace(b"\r", b"\n").strip(b"\n")
        self._buf = b""
        if not block:
            return []
        event = self._parse_block(block)
        return [event] if event is not None else []

    @staticmethod
    def _parse_block(block: bytes) -> Optional[SSEEvent]:
        event_name: Optional[str] = None
        event_id: Optional[str] = None
        data_lines: list[str] = []
        saw_data = False

        for raw_line in block.split(b"\n"):
            if not raw_line or raw_line.startswith(b":"):
                continue
            line = raw_line.decode("utf-8", errors="replace")
            field, sep, value = line.partition(":")
            if sep and value.startswith(" "):
                value = value[1:]

            if field == "data":
                saw_data = True
                data_lines.append(value)
            elif field == "event":
                event_name = value or None
            elif field == "id":
                event_id = value

        if not saw_data and event_name is None:
            return None
        return SSEEvent(event=event_name, data="\n".join(data_lines), id=event_id)


async def iter_sse_events(chunks: AsyncIterable[bytes]) -> AsyncIterator[SSEEvent]:
    """
    Decode an async byte stream into SSE events, pulling chunks on demand.

    Args:
        chunks: Raw response body chunks

    Yields:
        SSEEvent: Events in arrival order
    """
    decoder = SSEDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
    for event in decoder.close():
        yield event
