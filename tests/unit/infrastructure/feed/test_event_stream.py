"""Unit tests for server-sent event framing."""

from sentinel.infrastructure.feed.event_stream import EventFrame, iter_event_frames


async def _lines(*lines: str):
    for line in lines:
        yield line


async def _collect(*lines: str) -> list[EventFrame]:
    return [frame async for frame in iter_event_frames(_lines(*lines))]


class TestIterEventFrames:
    """Tests for iter_event_frames()."""

    async def test_single_event(self):
        frames = await _collect('data: {"a": 1}', "")
        assert frames == [EventFrame(data='{"a": 1}')]

    async def test_consecutive_events_in_order(self):
        frames = await _collect("data: one", "", "data: two", "", "data: three", "")
        assert [frame.data for frame in frames] == ["one", "two", "three"]

    async def test_multiline_data_joined(self):
        frames = await _collect("data: {", 'data: "a": 1', "data: }", "")
        assert frames[0].data == '{\n"a": 1\n}'

    async def test_data_without_space(self):
        frames = await _collect("data:payload", "")
        assert frames[0].data == "payload"

    async def test_comments_and_unknown_fields_ignored(self):
        frames = await _collect(": keep-alive", "id: 7", "retry: 1000", "data: x", "")
        assert frames == [EventFrame(data="x")]

    async def test_event_type(self):
        frames = await _collect("event: ping", "data: x", "", "data: y", "")

        assert frames[0].event == "ping"
        assert frames[1].event == "message"

    async def test_blank_lines_without_data_dropped(self):
        frames = await _collect("", "", ": comment", "", "data: x", "")
        assert len(frames) == 1

    async def test_trailing_event_dispatched_at_end(self):
        frames = await _collect("data: a", "", "data: b")
        assert [frame.data for frame in frames] == ["a", "b"]

    async def test_carriage_returns_stripped(self):
        frames = await _collect("data: x\r", "\r")
        assert frames == [EventFrame(data="x")]

    async def test_empty_stream(self):
        assert await _collect() == []
