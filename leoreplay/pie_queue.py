"""Proportional Integral controller Enhanced (PIE) active queue management."""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from typing import Protocol

from .dropping_queue import DroppingPacketQueue, get_arg
from .packet_queue import QueuedPacket

PACKET_SIZE = 1504

_UINT32 = 0xFFFFFFFF
DQ_COUNT_INVALID = _UINT32


class _UniformSource(Protocol):
    def random(self) -> float: ...


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class PIEPacketQueue(DroppingPacketQueue):
    """PIE queue dropping arriving packets with a delay-driven probability."""

    def __init__(
        self,
        args: str,
        clock: Callable[[], int] | None = None,
        rng: _UniformSource | None = None,
    ) -> None:
        super().__init__(args)
        self._clock = clock or _monotonic_ms
        self._rng = rng or random.Random()
        self.qdelay_ref = get_arg(args, "qdelay_ref")
        self.max_burst = get_arg(args, "max_burst")
        if self.qdelay_ref == 0 or self.max_burst == 0:
            raise ValueError(
                "PIE AQM queue must have qdelay_ref and max_burst parameters"
            )

        self.alpha = 0.125
        self.beta = 1.25
        self.t_update = 30
        self.dq_threshold = 16384

        self.drop_prob = 0.0
        self._burst_allowance = 0
        self._qdelay_old = 0
        self._current_qdelay = 0
        self._dq_count = DQ_COUNT_INVALID
        self._dq_tstamp = 0
        self._avg_dq_rate = 0
        self._last_update = self._clock()

    @property
    def _type(self) -> str:
        return "pie"

    def enqueue(self, packet: QueuedPacket) -> None:
        self._calculate_drop_prob()
        if not self._fits(packet):
            return
        if not self._drop_early():
            self._accept(packet)

    def _drop_early(self) -> bool:
        if self._burst_allowance > 0:
            return False
        if self._qdelay_old < self.qdelay_ref // 2 and self.drop_prob < 0.2:
            return False
        if self.size_bytes() < 2 * PACKET_SIZE:
            return False
        return self._rng.random() < self.drop_prob

    def dequeue(self) -> QueuedPacket:
        packet = super().dequeue()
        now = self._clock() & _UINT32

        if self.size_bytes() >= self.dq_threshold and self._dq_count == DQ_COUNT_INVALID:
            self._dq_tstamp = now
            self._dq_count = 0

        if self._dq_count != DQ_COUNT_INVALID:
            self._dq_count = (self._dq_count + len(packet.contents)) & _UINT32
            if self._dq_count > self.dq_threshold:
                dtime = (now - self._dq_tstamp) & _UINT32
                if dtime > 0:
                    rate_sample = self._dq_count // dtime
                    if self._avg_dq_rate == 0:
                        self._avg_dq_rate = rate_sample
                    else:
                        self._avg_dq_rate = (
                            self._avg_dq_rate - (self._avg_dq_rate >> 3)
                        ) + (rate_sample >> 3)

                    if self.size_bytes() < self.dq_threshold:
                        self._dq_count = DQ_COUNT_INVALID
                    else:
                        self._dq_count = 0
                        self._dq_tstamp = now

                    if self._burst_allowance > 0:
                        self._burst_allowance = max(0, self._burst_allowance - dtime)

        self._calculate_drop_prob()
        return packet

    def _calculate_drop_prob(self) -> None:
        """Replay the periodic probability update for every period elapsed."""
        now = self._clock()
        while now - self._last_update > self.t_update:
            update_prob = True
            self._qdelay_old = self._current_qdelay

            if self._avg_dq_rate > 0:
                self._current_qdelay = self.size_bytes() // self._avg_dq_rate
            else:
                self._current_qdelay = 0

            if self._current_qdelay == 0 and self.size_bytes() != 0:
                update_prob = False

            p = self.alpha * (self._current_qdelay - self.qdelay_ref) + self.beta * (
                self._current_qdelay - self._qdelay_old
            )

            if self.drop_prob < 0.01:
                p /= 128
            elif self.drop_prob < 0.1:
                p /= 32
            else:
                p /= 16

            self.drop_prob += p
            if self.drop_prob < 0:
                self.drop_prob = 0.0
            elif self.drop_prob > 1:
                self.drop_prob = 1.0
                update_prob = False

            if self._current_qdelay == 0 and self._qdelay_old == 0 and update_prob:
                self.drop_prob *= 0.98

            self._burst_allowance = max(0, self._burst_allowance - self.t_update)
            self._last_update += self.t_update

            half_ref = self.qdelay_ref // 2
            if (
                self.drop_prob == 0
                and self._current_qdelay < half_ref
                and self._qdelay_old < half_ref
                and self._avg_dq_rate > 0
            ):
                self._dq_count = DQ_COUNT_INVALID
                self._avg_dq_rate = 0
                self._burst_allowance = self.max_burst