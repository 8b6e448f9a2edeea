"""Queued packets and the unbounded packet queue."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass


@dataclass
class QueuedPacket:
    """A packet waiting in a queue, with the time (ms) it arrived."""

    contents: bytes
    arrival_time: int


class PacketQueue(ABC):
    """A queue of packets that tracks its size in bytes and packets."""

    @abstractmethod
    def enqueue(self, packet: QueuedPacket) -> None:
        """Offer a packet to the queue."""

    @abstractmethod
    def dequeue(self) -> QueuedPacket:
        """Remove and return the packet at the head of the queue."""

    @abstractmethod
    def empty(self) -> bool:
        """Whether no packets are queued."""

    @abstractmethod
    def size_bytes(self) -> int:
        """Total bytes of the queued packets."""

    @abstractmethod
    def size_packets(self) -> int:
        """Number of queued packets."""

    @abstractmethod
    def __str__(self) -> str:
        """A short description of the queue discipline."""


class InfinitePacketQueue(PacketQueue):
    """A queue without limits that never drops a packet."""

    def __init__(self, args: str = "") -> None:
        if args:
            raise ValueError("InfinitePacketQueue does not take arguments.")
        self._queue: deque[QueuedPacket] = deque()
        self._bytes = 0

    def enqueue(self, packet: QueuedPacket) -> None:
        self._bytes += len(packet.contents)
        self._queue.append(packet)

    def dequeue(self) -> QueuedPacket:
        if not self._queue:
            raise IndexError("dequeue from an empty packet queue")
        packet = self._queue.popleft()
        self._bytes -= len(packet.contents)
        return packet

    def empty(self) -> bool:
        return not self._queue

    def size_bytes(self) -> int:
        return self._bytes

    def size_packets(self) -> int:
        return len(self._queue)

    def __str__(self) -> str:
        return "infinite"