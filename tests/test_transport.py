"""Tests for herald.http.transport — BufferedTransport and the Transport protocol."""

import pytest

from herald.config import ResponseConfig
from herald.errors import HeadersAlreadySentError, TransportClosedError
from herald.http.transport import BufferedTransport, Transport
from herald.testing import RecordingTransport


class TestProtocol:
    def test_buffered_transport_satisfies_protocol(self) -> None:
        assert isinstance(BufferedTransport(), Transport)

    def test_recording_transport_satisfies_protocol(self) -> None:
        assert isinstance(RecordingTransport(), Transport)


class TestHeaderQueue:
    def test_defaults_are_queued(self) -> None:
        t = BufferedTransport([("X-Powered-By", "herald")])
        assert t.list_queued_headers() == [("X-Powered-By", "herald")]
        assert t.is_headers_sent() is False

    def test_config_defaults_come_first(self) -> None:
        t = BufferedTransport([("Server", "h")], config=ResponseConfig(powered_by="herald"))
        assert t.headers == (("X-Powered-By", "herald"), ("Server", "h"))

    def test_queue_without_replace_appends(self) -> None:
        t = BufferedTransport()
        t.queue_header("Set-Cookie", "a=1", replace=False)
        t.queue_header("Set-Cookie", "b=2", replace=False)
        assert t.headers == (("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"))

    def test_queue_with_replace_overwrites_case_insensitively(self) -> None:
        t = BufferedTransport([("content-type", "text/html")])
        t.queue_header("Content-Type", "text/plain", replace=True)
        assert t.headers == (("Content-Type", "text/plain"),)

    def test_drop_header(self) -> None:
        t = BufferedTransport([("X-A", "1"), ("x-a", "2"), ("X-B", "3")])
        t.drop_header("X-A")
        assert t.headers == (("X-B", "3"),)

    def test_drop_missing_header_is_silent(self) -> None:
        t = BufferedTransport()
        t.drop_header("X-Missing")
        assert t.headers == ()

    def test_raw_lines(self) -> None:
        t = BufferedTransport([("x-powered-by", "herald")])
        assert t.raw_lines() == ["X-Powered-By: herald"]


class TestOutput:
    def test_buffered_output_is_unflushed(self) -> None:
        t = BufferedTransport()
        assert t.has_buffered_unflushed_output() is False
        t.write("debug")
        assert t.has_buffered_unflushed_output() is True

    def test_discard(self) -> None:
        t = BufferedTransport()
        t.write(b"stray")
        t.discard_buffered_output()
        assert t.has_buffered_unflushed_output() is False
        t.write_body_and_terminate(b"body")
        assert t.body == b"body"

    def test_flush_marks_headers_sent(self) -> None:
        t = BufferedTransport()
        t.write("early")
        t.flush()
        assert t.is_headers_sent() is True
        assert t.body == b"early"
        assert t.has_buffered_unflushed_output() is False

    def test_terminate_appends_buffer_before_body(self) -> None:
        t = BufferedTransport()
        t.write("stray ")
        t.set_status_code(201)
        t.write_body_and_terminate(b"body")
        assert t.status_code == 201
        assert t.body == b"stray body"
        assert t.is_terminated is True
        assert t.is_headers_sent() is True


class TestGuards:
    def test_header_changes_after_flush_raise(self) -> None:
        t = BufferedTransport([("X-A", "1")])
        t.flush()
        with pytest.raises(HeadersAlreadySentError):
            t.queue_header("X-B", "2", replace=False)
        with pytest.raises(HeadersAlreadySentError):
            t.drop_header("X-A")
        with pytest.raises(HeadersAlreadySentError):
            t.set_status_code(404)
        assert t.headers == (("X-A", "1"),)

    def test_second_terminate_raises(self) -> None:
        t = BufferedTransport()
        t.write_body_and_terminate(b"once")
        with pytest.raises(TransportClosedError):
            t.write_body_and_terminate(b"twice")
        with pytest.raises(TransportClosedError):
            t.write("late")
        assert t.body == b"once"

    def test_body_after_flush_is_still_allowed(self) -> None:
        t = BufferedTransport()
        t.write("head ")
        t.flush()
        t.write_body_and_terminate(b"tail")
        assert t.body == b"head tail"
