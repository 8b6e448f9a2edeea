import pytest

from leoreplay.dropping_queue import (
    DropHeadPacketQueue,
    DropTailPacketQueue,
    get_arg,
)
from leoreplay.packet_queue import QueuedPacket


def packet(tag, size=10):
    return QueuedPacket(bytes([tag]) * size, tag)


def test_get_arg_present():
    assert get_arg("packets=100", "packets") == 100


def test_get_arg_absent_is_zero():
    assert get_arg("bytes=3000", "packets") == 0


def test_get_arg_stops_at_non_digit():
    assert get_arg("bytes=3000, packets=10", "bytes") == 3000
    assert get_arg("bytes=3000, packets=10", "packets") == 10


@pytest.mark.parametrize("args", ["packets100", "packets=", "packets=x5"])
def test_get_arg_malformed(args):
    with pytest.raises(ValueError):
        get_arg(args, "packets")


def test_requires_a_limit():
    with pytest.raises(ValueError):
        DropTailPacketQueue("")


def test_description_both_limits():
    assert str(DropTailPacketQueue("bytes=3000, packets=10")) == (
        "droptail [bytes=3000, packets=10]"
    )


def test_description_packets_only():
    assert str(DropHeadPacketQueue("packets=5")) == "drophead [packets=5]"


def test_description_bytes_only():
    assert str(DropTailPacketQueue("bytes=700")) == "droptail [bytes=700]"


def test_drop_tail_rejects_new_packets():
    queue = DropTailPacketQueue("packets=3")
    for tag in range(5):
        queue.enqueue(packet(tag))
    assert queue.size_packets() == 3
    assert [queue.dequeue().arrival_time for _ in range(3)] == [0, 1, 2]
    assert queue.empty()


def test_drop_tail_byte_limit():
    queue = DropTailPacketQueue("bytes=25")
    for tag in range(4):
        queue.enqueue(packet(tag, 10))
    assert queue.size_bytes() <= 25
    assert queue.size_bytes() == 2 * 10


def test_drop_tail_accepts_smaller_packet_after_rejection():
    queue = DropTailPacketQueue("bytes=25")
    queue.enqueue(packet(0, 20))
    queue.enqueue(packet(1, 10))
    queue.enqueue(packet(2, 5))
    assert [queue.dequeue().arrival_time for _ in range(queue.size_packets())] == [0, 2]


def test_drop_head_keeps_newest():
    queue = DropHeadPacketQueue("packets=3")
    for tag in range(5):
        queue.enqueue(packet(tag))
    assert queue.size_packets() == 3
    assert [queue.dequeue().arrival_time for _ in range(3)] == [2, 3, 4]


def test_drop_head_byte_limit_invariant():
    queue = DropHeadPacketQueue("bytes=100")
    for tag in range(20):
        queue.enqueue(packet(tag, 30))
        assert queue.size_bytes() <= 100
    assert queue.dequeue().arrival_time == 17


def test_dequeue_empty_raises():
    queue = DropTailPacketQueue("packets=1")
    with pytest.raises(IndexError):
        queue.dequeue()