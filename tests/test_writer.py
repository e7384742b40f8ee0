"""Tests for the write-once response writer."""
from __future__ import annotations

import json
import threading

import pytest

from jsend import InvalidRawJSONError, ResponseRecorder, WrittenAlreadyError, wrap

JSON_CONTENT_TYPE = "application/json"

WRAP_CASES = [
    (200, '{"foo":"bar"}', None, '{"status":"success","data":{"foo":"bar"}}', JSON_CONTENT_TYPE),
    (400, '{"foo":"bar"}', None, '{"status":"fail","data":{"foo":"bar"}}', JSON_CONTENT_TYPE),
    (503, "something wrong", None, '{"status":"error","message":"something wrong"}', JSON_CONTENT_TYPE),
    (200, '"foo"', "application/foo+json", '{"status":"success","data":"foo"}', "application/foo+json"),
]


@pytest.mark.parametrize("status_code, data, content_type, body, expected_content_type", WRAP_CASES)
def test_wrap_write(status_code, data, content_type, body, expected_content_type):
    recorder = ResponseRecorder()
    writer = wrap(recorder)
    if content_type:
        writer.headers["Content-Type"] = content_type

    writer.set_status_code(status_code)
    written = writer.write(data.encode())

    assert written == len(body)
    assert recorder.status_code == status_code
    assert recorder.headers["Content-Type"] == expected_content_type
    assert recorder.text == body


def test_wrap_keeps_content_type_set_before_wrapping():
    recorder = ResponseRecorder()
    recorder.headers["Content-Type"] = "application/foo+json"

    wrap(recorder)

    assert recorder.headers["Content-Type"] == "application/foo+json"


def test_wrap_does_not_touch_status_or_body():
    recorder = ResponseRecorder()

    writer = wrap(recorder)

    assert recorder.headers["Content-Type"] == JSON_CONTENT_TYPE
    assert recorder.wrote_status is False
    assert recorder.body == b""
    assert writer.status_code is None
    assert writer.written is False


def test_status_code_is_forwarded_immediately():
    recorder = ResponseRecorder()
    writer = wrap(recorder)

    writer.set_status_code(418)

    assert recorder.wrote_status is True
    assert recorder.status_code == 418
    assert writer.status_code == 418
    assert recorder.body == b""


def test_invalid_json_writes_nothing_but_keeps_status():
    recorder = ResponseRecorder()
    writer = wrap(recorder)
    writer.set_status_code(200)

    with pytest.raises(InvalidRawJSONError):
        writer.write(b"some invalid json")

    assert recorder.status_code == 200
    assert recorder.body == b""
    assert recorder.headers["Content-Type"] == JSON_CONTENT_TYPE


def test_error_status_accepts_non_json_bytes():
    recorder = ResponseRecorder()
    writer = wrap(recorder)
    writer.set_status_code(500)

    writer.write(b"\xff broken")

    assert json.loads(recorder.body) == {"status": "error", "message": "\ufffd broken"}


def test_unset_status_code_is_success():
    recorder = ResponseRecorder()
    writer = wrap(recorder)

    writer.write(b"[1, 2, 3]")

    assert recorder.status_code == 200
    assert recorder.text == '{"status":"success","data":[1, 2, 3]}'


def test_redirect_status_is_success():
    recorder = ResponseRecorder()
    writer = wrap(recorder)
    writer.set_status_code(302)

    writer.write('{"location": "/elsewhere"}')

    assert json.loads(recorder.body)["status"] == "success"


def test_empty_body_omits_data():
    recorder = ResponseRecorder()
    writer = wrap(recorder)
    writer.set_status_code(404)

    writer.write(b"")

    assert recorder.text == '{"status":"fail"}'


def test_multiple_write():
    recorder = ResponseRecorder()
    writer = wrap(recorder)

    writer.write(b'"hello"')
    with pytest.raises(WrittenAlreadyError):
        writer.write(b'"world"')

    assert writer.written is True
    assert recorder.text == '{"status":"success","data":"hello"}'


def test_rejected_write_consumes_budget():
    recorder = ResponseRecorder()
    writer = wrap(recorder)

    with pytest.raises(InvalidRawJSONError):
        writer.write(b"not json")
    with pytest.raises(WrittenAlreadyError):
        writer.write(b'"valid"')

    assert recorder.body == b""


def test_sink_failure_consumes_budget():
    class FlakyRecorder(ResponseRecorder):
        def __init__(self):
            super().__init__()
            self.attempts = 0

        def write(self, data: bytes) -> int:
            self.attempts += 1
            raise ConnectionResetError("peer reset")

    recorder = FlakyRecorder()
    writer = wrap(recorder)

    with pytest.raises(ConnectionResetError):
        writer.write(b'"first"')
    with pytest.raises(WrittenAlreadyError):
        writer.write(b'"second"')

    assert recorder.attempts == 1


def test_concurrent_writes_reach_sink_once():
    recorder = ResponseRecorder()
    writer = wrap(recorder)
    writer.set_status_code(201)
    workers = 16
    barrier = threading.Barrier(workers)
    outcomes: list[object] = []
    outcomes_lock = threading.Lock()

    def _write(index: int) -> None:
        barrier.wait()
        try:
            result: object = writer.write(json.dumps({"worker": index}).encode())
        except WrittenAlreadyError as exc:
            result = exc
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=_write, args=(i,)) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    successes = [item for item in outcomes if isinstance(item, int)]
    rejections = [item for item in outcomes if isinstance(item, WrittenAlreadyError)]
    assert len(successes) == 1
    assert len(rejections) == workers - 1
    body = json.loads(recorder.body)
    assert body["status"] == "success"
    assert set(body["data"]) == {"worker"}
    assert successes[0] == len(recorder.body)


def test_deeply_nested_json_is_invalid():
    recorder = ResponseRecorder()
    writer = wrap(recorder)
    depth = 100_000

    with pytest.raises(InvalidRawJSONError):
        writer.write(b"[" * depth + b"]" * depth)

    assert recorder.body == b""


def test_write_rejects_non_bytes():
    recorder = ResponseRecorder()
    writer = wrap(recorder)

    with pytest.raises(TypeError):
        writer.write(5)

    assert recorder.body == b""


def test_lone_surrogate_in_str_data_is_invalid():
    recorder = ResponseRecorder()
    writer = wrap(recorder)

    with pytest.raises(InvalidRawJSONError):
        writer.write('"bad\udcff"')

    assert recorder.body == b""


def test_lone_surrogate_in_error_message_is_replaced():
    recorder = ResponseRecorder()
    writer = wrap(recorder)
    writer.set_status_code(500)

    writer.write("bad\udcff")

    assert json.loads(recorder.body)["status"] == "error"
    assert "\udcff" not in recorder.body.decode("utf-8")
