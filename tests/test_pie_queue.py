import pytest

from leoreplay.packet_queue import QueuedPacket
from leoreplay.pie_queue import PIEPacketQueue

ARGS = "packets=50, qdelay_ref=20, max_burst=100"


class FakeClock:
    def __init__(self):
        self.now = 0

    def __call__(self):
        return self.now


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def test_requires_pie_parameters():
    with pytest.raises(ValueError):
        PIEPacketQueue("packets=10, qdelay_ref=20", FakeClock(), FixedRandom(1.0))


def test_requires_limit():
    with pytest.raises(ValueError):
        PIEPacketQueue("qdelay_ref=20, max_burst=100", FakeClock(), FixedRandom(1.0))


def test_description():
    queue = PIEPacketQueue(ARGS, FakeClock(), FixedRandom(1.0))
    assert str(queue) == "pie [packets=50]"


def test_initial_drop_probability_is_zero():
    queue = PIEPacketQueue(ARGS, FakeClock(), FixedRandom(0.0))
    assert queue.drop_prob == 0.0


def test_low_delay_accepts_even_with_zero_random():
    clock = FakeClock()
    queue = PIEPacketQueue(ARGS, clock, FixedRandom(0.0))
    for tag in range(10):
        queue.enqueue(QueuedPacket(bytes([tag]) * 1500, clock.now))
    assert queue.size_packets() == 10


def test_packet_limit_enforced():
    clock = FakeClock()
    queue = PIEPacketQueue("packets=3, qdelay_ref=20, max_burst=100", clock, FixedRandom(1.0))
    for tag in range(6):
        queue.enqueue(QueuedPacket(bytes([tag]), 0))
    assert queue.size_packets() == 3
    assert [queue.dequeue().contents[0] for _ in range(3)] == [0, 1, 2]


def test_fifo_with_advancing_clock():
    clock = FakeClock()
    queue = PIEPacketQueue(ARGS, clock, FixedRandom(1.0))
    for tag in range(40):
        clock.now += 7
        queue.enqueue(QueuedPacket(bytes([tag]) * 1000, clock.now))
    accepted = queue.size_packets()
    out = []
    while not queue.empty():
        clock.now += 13
        out.append(queue.dequeue().contents[0])
    assert len(out) == accepted
    assert out == sorted(out)
    assert queue.size_bytes() == 0


def test_drop_probability_stays_in_range():
    clock = FakeClock()
    queue = PIEPacketQueue("bytes=1000000, qdelay_ref=5, max_burst=30", clock, FixedRandom(0.5))
    for step in range(200):
        clock.now += 5
        queue.enqueue(QueuedPacket(b"x" * 1500, clock.now))
        queue.enqueue(QueuedPacket(b"y" * 1500, clock.now))
        if step % 3 == 0 and not queue.empty():
            queue.dequeue()
        assert 0.0 <= queue.drop_prob <= 1.0


def test_dequeue_empty_raises():
    queue = PIEPacketQueue(ARGS, FakeClock(), FixedRandom(1.0))
    with pytest.raises(IndexError):
        queue.dequeue()