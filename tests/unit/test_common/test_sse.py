"""
SSE Decoder Unit Tests
"""

import pytest

from agentscope_provider.common.sse import SSEDecoder, SSEEvent, iter_sse_events


def test_decoder_extracts_event_and_data():
    decoder = SSEDecoder()
    events = decoder.feed(b'event: text\ndata: {"text":"hi"}\n\n')
    assert events == [SSEEvent(event="text", data='{"text":"hi"}')]


def test_decoder_buffers_incomplete_event_across_chunks():
    decoder = SSEDecoder()
    assert decoder.feed(b"event: message\nda") == []
    assert decoder.feed(b"ta: {\"a\":") == []
    events = decoder.feed(b"1}\n\n")
    assert events == [SSEEvent(event="message", data='{"a":1}')]


def test_decoder_handles_crlf_split_between_chunks():
    decoder = SSEDecoder()
    assert decoder.feed(b"data: one\r") == []
    assert decoder.feed(b"\n\r\n") == [SSEEvent(event=None, data="one")]


def test_decoder_joins_multiline_data_and_skips_comments():
    decoder = SSEDecoder()
    events = decoder.feed(b": keep-alive\n\ndata: a\ndata: b\n\n")
    assert events == [SSEEvent(event=None, data="a\nb")]


def test_decoder_keeps_empty_data_and_done_marker():
    decoder = SSEDecoder()
    events = decoder.feed(b"data:\n\ndata: [DONE]\n\n")
    assert [e.data for e in events] == ["", "[DONE]"]


def test_decoder_close_flushes_unterminated_event():
    decoder = SSEDecoder()
    assert decoder.feed(b"event: response\ndata: {}") == []
    assert decoder.close() == [SSEEvent(event="response", data="{}")]
    assert decoder.close() == []


def test_decoder_keeps_multibyte_text_split_across_chunks():
    payload = 'data: {"text":"你好"}\n\n'.encode("utf-8")
    decoder = SSEDecoder()
    assert decoder.feed(payload[:16]) == []
    events = decoder.feed(payload[16:])
    assert events[0].data == '{"text":"你好"}'


def test_decoder_strips_leading_byte_order_mark():
    decoder = SSEDecoder()
    events = decoder.feed('\ufeffevent: response\ndata: {"a":1}\n\n'.encode("utf-8"))
    assert events == [SSEEvent(event="response", data='{"a":1}')]


def test_decoder_strips_byte_order_mark_split_across_chunks():
    decoder = SSEDecoder()
    assert decoder.feed(b"\xef") == []
    assert decoder.feed(b"\xbb") == []
    assert decoder.feed(b'\xbfdata: {"a":1}\n\n') == [SSEEvent(event=None, data='{"a":1}')]


def test_decoder_strips_only_the_first_byte_order_mark():
    decoder = SSEDecoder()
    assert decoder.feed(b"data: 1\n\n") == [SSEEvent(event=None, data="1")]
    events = decoder.feed('\ufeffdata: 2\n\n'.encode("utf-8"))
    # Only a BOM at stream start is dropped; the field name no longer matches
    assert events == []


@pytest.mark.asyncio
async def test_iter_sse_events_pulls_chunks_in_order():
    async def chunks():
        yield b"data: 1\n\nda"
        yield b"ta: 2\n\n"
        yield b"data: 3"

    events = [event async for event in iter_sse_events(chunks())]
    assert [e.data for e in events] == ["1", "2", "3"]
