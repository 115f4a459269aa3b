import pytest

from amqpwire.buffers import FrameError, FrameReader, OutBuffer
from amqpwire.fields import Boolean, Table
from amqpwire.metadata import Envelope, MetaData


def encode(meta):
    buffer = OutBuffer()
    meta.fill(buffer)
    return buffer.getvalue()


def test_empty_metadata_is_two_flag_octets():
    meta = MetaData()
    assert encode(meta) == b"\x00\x00"
    assert meta.size() == 2


def test_content_type_wire_bytes():
    meta = MetaData(content_type="a")
    assert encode(meta) == b"\x80\x00\x01a"


def test_message_id_flag_in_second_octet():
    data = encode(MetaData(message_id="m"))
    assert data[:2] == b"\x00\x80"


def test_full_round_trip():
    meta = MetaData(
        content_type="text/plain",
        content_encoding="utf-8",
        headers=Table({"flag": Boolean(True)}),
        delivery_mode=2,
        priority=5,
        correlation_id="corr",
        reply_to="replies",
        expiration="60000",
        message_id="mid",
        timestamp=1234567890,
        type_name="kind",
        user_id="user",
        app_id="app",
        cluster_id="cluster",
    )
    data = encode(meta)
    assert len(data) == meta.size()
    reader = FrameReader(data)
    decoded = MetaData.decode(reader)
    assert decoded == meta
    assert reader.remaining() == 0


def test_partial_round_trip_keeps_unset_as_none():
    meta = MetaData(reply_to="r", timestamp=7)
    decoded = MetaData.decode(FrameReader(encode(meta)))
    assert decoded.reply_to == "r"
    assert decoded.timestamp == 7
    assert decoded.content_type is None
    assert decoded.headers is None


def test_persistent():
    meta = MetaData()
    assert not meta.persistent()
    meta.set_persistent()
    assert meta.persistent()
    assert meta.delivery_mode == 2
    meta.set_persistent(False)
    assert not meta.persistent()
    assert meta.delivery_mode is None
    assert encode(meta) == b"\x00\x00"


def test_update_copies_all():
    source = MetaData(app_id="app", headers=Table({"x": Boolean(False)}))
    target = MetaData(content_type="old")
    target.update(source)
    assert target == source
    assert target.content_type is None
    assert target.headers is not source.headers


def test_truncated_decode_raises():
    with pytest.raises(FrameError):
        MetaData.decode(FrameReader(b"\x80\x00"))


def test_short_string_too_long_rejected():
    with pytest.raises(ValueError):
        MetaData(content_type="x" * 256).size()


def test_priority_out_of_range_rejected():
    with pytest.raises(ValueError):
        encode(MetaData(priority=300))


def test_envelope_body_and_properties():
    envelope = Envelope(b"hello", content_type="text/plain")
    assert envelope.body_size() == 5
    assert envelope.body == b"hello"
    decoded = MetaData.decode(FrameReader(encode(envelope)))
    assert decoded.content_type == "text/plain"