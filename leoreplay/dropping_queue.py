"""Packet queues bounded by a byte or packet limit."""

from __future__ import annotations

import re
from abc import abstractmethod
from collections import deque

from .packet_queue import PacketQueue, QueuedPacket

_LEADING_DIGITS = re.compile(r"[0-9]*")


def get_arg(args: str, name: str) -> int:
    """Read ``name=<digits>`` from a queue argument string; 0 if absent."""
    offset = args.find(name)
    if offset == -1:
        return 0
    offset += len(name)
    if args[offset : offset + 1] != "=":
        raise ValueError(f"could not parse queue arguments: {args}")
    match = _LEADING_DIGITS.match(args, offset + 1)
    digits = match.group() if match else ""
    if not digits:
        raise ValueError(f"could not parse queue arguments: {args}")
    return int(digits)


class DroppingPacketQueue(PacketQueue):
    """A FIFO queue with optional byte and packet limits."""

    def __init__(self, args: str) -> None:
        self.packet_limit = get_arg(args, "packets")
        self.byte_limit = get_arg(args, "bytes")
        if self.packet_limit == 0 and self.byte_limit == 0:
            raise ValueError("Dropping queue must have a byte or packet limit.")
        self._queue: deque[QueuedPacket] = deque()
        self._bytes = 0

    @property
    @abstractmethod
    def _type(self) -> str:
        """Name of the queue discipline."""

    def _accept(self, packet: QueuedPacket) -> None:
        self._bytes += len(packet.contents)
        self._queue.append(packet)

    def _good_with(self, size_in_bytes: int, size_in_packets: int) -> bool:
        if self.byte_limit and size_in_bytes > self.byte_limit:
            return False
        if self.packet_limit and size_in_packets > self.packet_limit:
            return False
        return True

    def _good(self) -> bool:
        return self._good_with(self.size_bytes(), self.size_packets())

    def _fits(self, packet: QueuedPacket) -> bool:
        return self._good_with(
            self.size_bytes() + len(packet.contents), self.size_packets() + 1
        )

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
        limits = []
        if self.byte_limit:
            limits.append(f"bytes={self.byte_limit}")
        if self.packet_limit:
            limits.append(f"packets={self.packet_limit}")
        return f"{self._type} [{', '.join(limits)}]"


class DropTailPacketQueue(DroppingPacketQueue):
    """Drops arriving packets that would exceed the limits."""

    @property
    def _type(self) -> str:
        return "droptail"

    def enqueue(self, packet: QueuedPacket) -> None:
        if self._fits(packet):
            self._accept(packet)


class DropHeadPacketQueue(DroppingPacketQueue):
    """Always accepts, then drops from the head until within limits."""

    @property
    def _type(self) -> str:
        return "drophead"

    def enqueue(self, packet: QueuedPacket) -> None:
        self._accept(packet)
        while not self._good():
            self.dequeue()