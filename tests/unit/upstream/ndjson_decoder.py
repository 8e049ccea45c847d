"""Unit tests for NDJSON line splitting and fragment parsing."""

from __future__ import annotations

from llama_relay.upstream import NdjsonLineDecoder, parse_line
from llama_relay.upstream.decoder import decode_line


def test_feed_returns_only_complete_lines() -> None:
    decoder = NdjsonLineDecoder()
    assert decoder.feed(b'{"response": "He"') == []
    assert decoder.pending > 0
    assert decoder.feed(b', "done": false}\n{"resp') == [b'{"response": "He", "done": false}']
    assert decoder.feed(b'onse": "llo"}\n') == [b'{"response": "llo"}']
    assert decoder.pending == 0


def test_feed_splits_several_lines_in_one_chunk() -> None:
    decoder = NdjsonLineDecoder()
    lines = decoder.feed(b'{"a": 1}\n{"b": 2}\n{"c": 3}\n')
    assert lines == [b'{"a": 1}', b'{"b": 2}', b'{"c": 3}']


def test_blank_lines_and_carriage_returns_are_dropped() -> None:
    decoder = NdjsonLineDecoder()
    assert decoder.feed(b'{"a": 1}\r\n\n   \n{"b": 2}\r\n') == [b'{"a": 1}', b'{"b": 2}']


def test_multibyte_character_split_across_chunks() -> None:
    encoded = '{"response": "café"}\n'.encode()
    split_at = encoded.index(b"\xc3") + 1
    decoder = NdjsonLineDecoder()
    assert decoder.feed(encoded[:split_at]) == []
    (line,) = decoder.feed(encoded[split_at:])
    fragment = parse_line(line)
    assert fragment is not None
    assert fragment.text == "café"


def test_flush_returns_unterminated_tail() -> None:
    decoder = NdjsonLineDecoder()
    decoder.feed(b'{"response": "x", "done": true}')
    assert decoder.flush() == [b'{"response": "x", "done": true}']
    assert decoder.flush() == []


def test_empty_chunk_is_ignored() -> None:
    decoder = NdjsonLineDecoder()
    assert decoder.feed(b"") == []
    assert decoder.pending == 0


def test_parse_line_reads_text_and_done() -> None:
    fragment = parse_line(b'{"response": "llo", "done": false, "model": "m"}')
    assert fragment is not None
    assert fragment.text == "llo"
    assert fragment.done is False
    assert fragment.raw["model"] == "m"


def test_parse_line_missing_response_is_empty_text() -> None:
    fragment = parse_line(b'{"done": true}')
    assert fragment is not None
    assert fragment.text == ""
    assert fragment.done is True


def test_parse_line_rejects_malformed_json() -> None:
    assert parse_line(b"{not json") is None


def test_parse_line_rejects_non_object() -> None:
    assert parse_line(b"[1, 2, 3]") is None
    assert parse_line(b'"text"') is None


def test_decode_line_keeps_raw_bytes_for_malformed_lines() -> None:
    line = decode_line(b"{not json")
    assert line.raw == b"{not json"
    assert line.fragment is None
