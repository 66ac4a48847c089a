"""Server-sent event framing.

The status server writes one event per refresh as ``data: <json>\\n\\n``.
This module groups response lines into events.
"""

from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass


@dataclass(frozen=True)
class EventFrame:
    """A single dispatched server-sent event.

    Attributes:
        data: Concatenated ``data:`` lines, joined with newlines
        event: Event type (``message`` when not given)
    """

    data: str
    event: str = "message"


async def iter_event_frames(lines: AsyncIterable[str]) -> AsyncIterator[EventFrame]:
    """Group event-stream lines into frames.

    A blank line dispatches the pending event. Comment lines (starting with
    ``:``) and fields other than ``data`` and ``event`` are ignored. Events
    without data are dropped. A pending event is dispatched if the stream
    ends without a trailing blank line.

    Args:
        lines: Decoded response lines without line terminators

    Yields:
        EventFrame for each complete event
    """
    data_lines: list[str] = []
    event_type = "message"

    async for line in lines:
        line = line.rstrip("\r\n")

        if not line:
            if data_lines:
                yield EventFrame(data="\n".join(data_lines), event=event_type)
            data_lines = []
            event_type = "message"
            continue

        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if field == "data":
            data_lines.append(value)
        elif field == "event":
            event_type = value or "message"

    if data_lines:
        yield EventFrame(data="\n".join(data_lines), event=event_type)
