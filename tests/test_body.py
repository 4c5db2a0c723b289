import io

import pytest

from apic import BodyEncodeError, BodyReadError, BodySeekError, ReplayableBody, json_body, xml_body
from apic.body import is_seekable, make_replayable, rewind


class TestReplayableBody:
    def test_close_keeps_body_readable(self):
        body = ReplayableBody(b"data")
        body.read()

        body.close()
        body.seek(0)

        assert body.read() == b"data"

    def test_make_replayable_keeps_seekable_body(self):
        body = io.BytesIO(b"data")

        assert make_replayable(body) is body

    def test_make_replayable_copies_one_shot_body(self, one_shot_body):
        body = make_replayable(one_shot_body(b"data"))

        assert isinstance(body, ReplayableBody)
        assert body.read() == b"data"
        body.seek(0)
        assert body.read() == b"data"

    def test_make_replayable_encodes_text(self):
        class TextBody:
            def read(self):
                return "héllo"

        assert make_replayable(TextBody()).read() == "héllo".encode()

    def test_make_replayable_read_error(self, fail_on_read):
        with pytest.raises(BodyReadError) as exc_info:
            make_replayable(fail_on_read)

        assert exc_info.value.__cause__ is fail_on_read.error

    def test_make_replayable_closed_body(self):
        body = io.BytesIO(b"data")
        body.close()

        with pytest.raises(BodyReadError) as exc_info:
            make_replayable(body)

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_is_seekable(self, one_shot_body, fail_on_seek):
        assert is_seekable(io.BytesIO()) is True
        assert is_seekable(one_shot_body()) is False
        assert is_seekable(fail_on_seek) is True

    def test_rewind_error(self, fail_on_seek):
        with pytest.raises(BodySeekError) as exc_info:
            rewind(fail_on_seek)

        assert exc_info.value.__cause__ is fail_on_seek.error


class TestBodyEncoders:
    def test_json_body(self):
        body = json_body({"item": "iPhoneX", "qty": 1})

        assert body.read() == b'{"item": "iPhoneX", "qty": 1}\n'

    def test_json_body_encode_error(self):
        with pytest.raises(BodyEncodeError):
            json_body({"when": object()})

    def test_xml_body(self):
        body = xml_body({"item": "iPhoneX", "qty": 1, "gift": False}, root="order")

        assert body.read() == (
            b"<order><item>iPhoneX</item><qty>1</qty><gift>false</gift></order>"
        )

    def test_xml_body_sequence(self):
        body = xml_body(["a", "b"], root="items")

        assert body.read() == b"<items><item>a</item><item>b</item></items>"

    def test_xml_body_encode_error(self):
        with pytest.raises(BodyEncodeError):
            xml_body({"when": object()})
