"""Tests for the CDX line parser and the payload field scanner."""
from __future__ import annotations

import pytest

from cdxscan.errors import MalformedRecordError, PayloadParseError
from cdxscan.parsers.base import CdxRecord, PayloadFields
from cdxscan.parsers.cdx import parse_record
from cdxscan.parsers.payload import scan_payload


# ---------------------------------------------------------------------------
# parse_record
# ---------------------------------------------------------------------------

class TestParseRecord:
    def test_splits_on_first_two_spaces(self) -> None:
        rec = parse_record('org,example)/ 20170820123456 {"url": "http://example.org/"}')
        assert rec == CdxRecord(
            url_key="org,example)/",
            timestamp="20170820123456",
            payload='{"url": "http://example.org/"}',
        )

    def test_payload_keeps_inner_spaces(self) -> None:
        rec = parse_record('k t {"a": "x y z", "b": " "}')
        assert rec.url_key == "k"
        assert rec.payload == '{"a": "x y z", "b": " "}'

    def test_empty_fields_allowed(self) -> None:
        rec = parse_record("  payload")
        assert rec.url_key == ""
        assert rec.timestamp == ""
        assert rec.payload == "payload"

    @pytest.mark.parametrize("line", [
        "",
        "onlyonespace{...}",
        "nospaces",
        "one space",
    ])
    def test_fewer_than_two_spaces_raises(self, line: str) -> None:
        with pytest.raises(MalformedRecordError) as info:
            parse_record(line)
        assert info.value.line == line

    def test_error_names_missing_field(self) -> None:
        with pytest.raises(MalformedRecordError, match="timestamp"):
            parse_record("key 20170820")


# ---------------------------------------------------------------------------
# scan_payload
# ---------------------------------------------------------------------------

class TestScanPayload:
    def test_lower_cases_url_and_mime(self) -> None:
        fields = scan_payload('{"url": "http://EXAMPLE.com/x.PDF", "mime": "Application/PDF"}')
        assert fields == PayloadFields(mime="application/pdf", url="http://example.com/x.pdf")

    def test_other_fields_ignored(self) -> None:
        fields = scan_payload(
            '{"url": "http://a.org/", "mime": "text/html", "status": "200", '
            '"digest": "XYZ", "length": "1234", "offset": "99", "filename": "crawl-data/f.warc.gz"}'
        )
        assert fields.mime == "text/html"
        assert fields.url == "http://a.org/"

    def test_missing_fields_are_none(self) -> None:
        assert scan_payload('{"status": "200"}') == PayloadFields()

    def test_only_mime(self) -> None:
        assert scan_payload('{"mime": "text/plain"}') == PayloadFields(mime="text/plain")

    def test_non_string_values_ignored(self) -> None:
        assert scan_payload('{"mime": 5, "url": null}') == PayloadFields()

    def test_nested_keys_ignored(self) -> None:
        fields = scan_payload('{"meta": {"mime": "text/html"}, "url": "http://a.org/"}')
        assert fields.mime is None
        assert fields.url == "http://a.org/"

    def test_empty_object(self) -> None:
        assert scan_payload("{}") == PayloadFields()

    @pytest.mark.parametrize("payload", [
        "",
        "not json",
        '{"url": "http://a.org/"',
        '{"url": }',
        '["mime", "text/html"]',
        '"text/html"',
    ])
    def test_malformed_raises(self, payload: str) -> None:
        with pytest.raises(PayloadParseError) as info:
            scan_payload(payload)
        assert info.value.payload == payload
