import pytest

from amqpwire.buffers import FrameError, FrameReader
from amqpwire.basic import (
    BasicAckFrame,
    BasicConsumeOKFrame,
    BasicGetFrame,
    BasicNackFrame,
    BasicQosOKFrame,
    BasicRecoverOKFrame,
)


def _arguments(frame):
    return FrameReader(frame.encode()[11:-1])


def _ids(frame):
    reader = FrameReader(frame.encode()[7:11])
    return reader.next_uint16(), reader.next_uint16()


@pytest.mark.parametrize(
    "frame, method_id",
    [
        (BasicAckFrame(1, 5), 80),
        (BasicConsumeOKFrame(1, "tag"), 21),
        (BasicGetFrame(1, "queue"), 70),
        (BasicNackFrame(1, 5), 120),
        (BasicQosOKFrame(1), 11),
        (BasicRecoverOKFrame(1), 111),
    ],
)
def test_ids_and_sizes(frame, method_id):
    assert _ids(frame) == (60, method_id)
    assert frame.total_size() == len(frame.encode())


def test_ack_payload_size():
    assert BasicAckFrame(1, 5, True).payload_size() == 4 + 9


def test_ack_bytes():
    data = BasicAckFrame(1, 5, True).encode()
    assert data == (
        b"\x01\x00\x01\x00\x00\x00\x0d\x00\x3c\x00\x50"
        + (5).to_bytes(8, "big")
        + b"\x01\xce"
    )


@pytest.mark.parametrize("multiple", [True, False])
def test_ack_round_trip(multiple):
    frame = BasicAckFrame(3, 2**40, multiple)
    assert BasicAckFrame.decode(3, _arguments(frame)) == frame


def test_ack_is_not_synchronous():
    assert BasicAckFrame(1, 1).synchronous is False
    assert BasicGetFrame(1, "q").synchronous is True


def test_ack_tag_out_of_range():
    with pytest.raises(ValueError):
        BasicAckFrame(1, -1)


def test_consume_ok_round_trip():
    frame = BasicConsumeOKFrame(2, "consumer-1")
    assert frame.payload_size() == 4 + len("consumer-1") + 1
    assert BasicConsumeOKFrame.decode(2, _arguments(frame)) == frame


def test_consume_ok_tag_too_long():
    with pytest.raises(ValueError):
        BasicConsumeOKFrame(1, "x" * 256)


@pytest.mark.parametrize("no_ack", [True, False])
def test_get_round_trip(no_ack):
    frame = BasicGetFrame(4, "jobs", no_ack)
    assert frame.payload_size() == 4 + len("jobs") + 4
    assert BasicGetFrame.decode(4, _arguments(frame)) == frame


def test_get_reserved_field_is_zero():
    reader = _arguments(BasicGetFrame(4, "jobs"))
    assert reader.next_uint16() == 0


@pytest.mark.parametrize(
    "multiple, requeue", [(False, False), (True, False), (False, True), (True, True)]
)
def test_nack_round_trip(multiple, requeue):
    frame = BasicNackFrame(5, 77, multiple, requeue)
    assert BasicNackFrame.decode(5, _arguments(frame)) == frame


def test_nack_flag_octet():
    reader = _arguments(BasicNackFrame(5, 77, True, True))
    assert reader.next_uint64() == 77
    assert reader.next_uint8() == 3


def test_empty_frames_round_trip():
    assert BasicQosOKFrame.decode(6, _arguments(BasicQosOKFrame(6))) == BasicQosOKFrame(6)
    assert BasicRecoverOKFrame.decode(6, FrameReader(b"")).channel == 6
    assert BasicQosOKFrame(6).payload_size() == 4


def test_truncated_ack():
    with pytest.raises(FrameError):
        BasicAckFrame.decode(1, FrameReader(b"\x00\x00\x00"))