"""Tests for the sidecar metadata codec."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from gazetteer_core.cache.codec import MetadataDecodeError, decode, encode
from gazetteer_core.cache.models import CacheEntry


def _entry(**overrides) -> CacheEntry:
    defaults = dict(
        tenant="acme",
        source_timestamp=datetime(2024, 3, 1, 8, 15, 30, 123456, tzinfo=UTC),
        cache_timestamp=datetime(2024, 3, 1, 9, 0, 0, tzinfo=UTC),
    )
    defaults.update(overrides)
    return CacheEntry(**defaults)


# ── encode ───────────────────────────────────────────────────────────


class TestEncode:
    def test_flat_record(self):
        payload = json.loads(encode(_entry()))
        assert payload == {
            "tenant": "acme",
            "source_timestamp": "2024-03-01T08:15:30.123456+00:00",
            "cache_timestamp": "2024-03-01T09:00:00+00:00",
        }

    def test_two_space_indent(self):
        text = encode(_entry()).decode("utf-8")
        assert '\n  "tenant": "acme"' in text


# ── decode ───────────────────────────────────────────────────────────


class TestDecode:
    def test_round_trip_is_exact(self):
        entry = _entry()
        assert decode(encode(entry)) == entry

    def test_round_trip_keeps_independent_clocks(self):
        # cache_timestamp older than source_timestamp is legal
        entry = _entry(cache_timestamp=datetime(2020, 1, 1, tzinfo=UTC))
        decoded = decode(encode(entry))
        assert decoded.cache_timestamp < decoded.source_timestamp

    def test_non_utc_offset_normalised(self):
        plus_two = timezone(timedelta(hours=2))
        entry = _entry(source_timestamp=datetime(2024, 3, 1, 10, 0, tzinfo=plus_two))
        decoded = decode(encode(entry))
        assert decoded.source_timestamp == datetime(2024, 3, 1, 8, 0, tzinfo=UTC)
        assert decoded.source_timestamp.utcoffset() == timedelta(0)

    def test_naive_timestamp_read_as_utc(self):
        raw = json.dumps({
            "tenant": "acme",
            "source_timestamp": "2024-03-01T08:00:00",
            "cache_timestamp": "2024-03-01T09:00:00",
        }).encode()
        entry = decode(raw)
        assert entry.source_timestamp.tzinfo is not None
        assert entry.source_timestamp == datetime(2024, 3, 1, 8, 0, tzinfo=UTC)

    @pytest.mark.parametrize(
        "raw",
        [
            b"",
            b"not json",
            b"[]",
            b'{"tenant": "acme"',
            b'{"tenant": "acme", "source_timestamp": "2024-03-01T08:00:00+00:00"}',
            b'{"tenant": "acme", "source_timestamp": "yesterday",'
            b' "cache_timestamp": "2024-03-01T09:00:00+00:00"}',
            b'{"tenant": "acme", "source_timestamp": 1709280000,'
            b' "cache_timestamp": "2024-03-01T09:00:00+00:00"}',
            b'{"tenant": "   ", "source_timestamp": "2024-03-01T08:00:00+00:00",'
            b' "cache_timestamp": "2024-03-01T09:00:00+00:00"}',
            b'{"tenant": 42, "source_timestamp": "2024-03-01T08:00:00+00:00",'
            b' "cache_timestamp": "2024-03-01T09:00:00+00:00"}',
            b'{"tenant": "acme", "source_timestamp": "2024-03-01T08:00:00+00:00",'
            b' "cache_timestamp": "2024-03-01T09:00:00+00:00", "extra": 1}',
            b"\xff\xfe\x00garbage",
        ],
    )
    def test_malformed_input_raises_typed_error(self, raw: bytes):
        with pytest.raises(MetadataDecodeError):
            decode(raw)

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode(b"{}")
