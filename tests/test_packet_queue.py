import pytest

from leoreplay.packet_queue import InfinitePacketQueue, QueuedPacket


def test_rejects_arguments():
    with pytest.raises(ValueError):
        InfinitePacketQueue("packets=10")


def test_description():
    assert str(InfinitePacketQueue("")) == "infinite"


def test_fifo_order_and_sizes():
    queue = InfinitePacketQueue("")
    packets = [QueuedPacket(bytes([i]) * (i + 1), i) for i in range(5)]
    for packet in packets:
        queue.enqueue(packet)
    assert queue.size_packets() == len(packets)
    assert queue.size_bytes() == sum(len(p.contents) for p in packets)
    out = [queue.dequeue() for _ in packets]
    assert out == packets
    assert queue.empty()
    assert queue.size_bytes() == 0
    assert queue.size_packets() == 0


def test_never_drops():
    queue = InfinitePacketQueue()
    for i in range(1000):
        queue.enqueue(QueuedPacket(b"x" * 1500, i))
    assert queue.size_packets() == 1000
    assert queue.size_bytes() == 1000 * 1500


def test_dequeue_empty_raises():
    queue = InfinitePacketQueue()
    with pytest.raises(IndexError):
        queue.dequeue()


def test_sizes_track_partial_drain():
    queue = InfinitePacketQueue()
    queue.enqueue(QueuedPacket(b"abc", 0))
    queue.enqueue(QueuedPacket(b"defgh", 1))
    first = queue.dequeue()
    assert first.contents == b"abc"
    assert queue.size_bytes() == len(b"defgh")
    assert not queue.empty()