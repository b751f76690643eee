"""Tests for frame decoding and notification parsing."""

import json

import pytest

from wds_client.constants import MAX_MESSAGE_SIZE
from wds_client.errors import WDSProtocolError
from wds_client.protocol import decode_frame, parse_notification
from wds_client.types import DiffNotification, ReloadNotification, ResourceKind


class TestDecodeFrame:
    def test_text_frame(self):
        assert decode_frame('{"type":"reload"}') == {"type": "reload"}

    def test_binary_frame(self):
        assert decode_frame(b'{"type":"reload"}') == {"type": "reload"}

    def test_non_object_json_is_returned(self):
        assert decode_frame("[1, 2]") == [1, 2]

    def test_malformed_json(self):
        with pytest.raises(WDSProtocolError):
            decode_frame("{not json")

    def test_invalid_utf8(self):
        with pytest.raises(WDSProtocolError):
            decode_frame(b"\xff\xfe{")

    def test_oversized_frame(self):
        payload = json.dumps({"type": "reload", "pad": "x" * MAX_MESSAGE_SIZE})
        with pytest.raises(WDSProtocolError):
            decode_frame(payload)

    def test_text_frame_limit_counts_utf8_bytes(self):
        # 3 bytes per character: under the limit in characters, over it in bytes
        pad = "€" * (MAX_MESSAGE_SIZE // 2)
        payload = json.dumps({"type": "reload", "pad": pad}, ensure_ascii=False)
        assert len(payload) < MAX_MESSAGE_SIZE
        with pytest.raises(WDSProtocolError):
            decode_frame(payload)


class TestParseNotification:
    def test_reload(self):
        assert parse_notification({"type": "reload"}) == ReloadNotification()

    def test_reload_ignores_extra_fields(self):
        msg = {"type": "reload", "resource": "html", "path": "/x"}
        assert isinstance(parse_notification(msg), ReloadNotification)

    def test_html_diff(self):
        msg = {"type": "diff", "resource": "html", "path": "/about/"}
        assert parse_notification(msg) == DiffNotification(ResourceKind.HTML, "/about/")

    def test_css_diff(self):
        msg = {"type": "diff", "resource": "css", "path": "/app.css"}
        assert parse_notification(msg) == DiffNotification(ResourceKind.CSS, "/app.css")

    def test_unknown_resource_is_other(self):
        msg = {"type": "diff", "resource": "js", "path": "/app.js"}
        assert parse_notification(msg).resource is ResourceKind.OTHER

    def test_missing_resource_is_other(self):
        assert parse_notification({"type": "diff"}).resource is ResourceKind.OTHER

    @pytest.mark.parametrize("path", [None, "", 42, ["/x"]])
    def test_missing_or_invalid_path(self, path):
        msg = {"type": "diff", "resource": "css", "path": path}
        assert parse_notification(msg).path is None

    @pytest.mark.parametrize(
        "message",
        [None, 1, "reload", [], {}, {"type": 1}, {"type": "ping"}, {"kind": "reload"}],
    )
    def test_ignored_shapes(self, message):
        assert parse_notification(message) is None
