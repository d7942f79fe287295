"""IR pulse timing: tolerance matching, decode results and the capture state machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

# Length of one sampling tick, in microseconds.
USECPERTICK = 50

# Maximum number of intervals the capture buffer can hold.
RAWBUF = 101

# When received, marks tend to be this much too long and spaces this much too short.
MARK_EXCESS = 100

# Percentage tolerance applied to measured intervals.
TOLERANCE = 25
LTOL = 1.0 - TOLERANCE / 100.0
UTOL = 1.0 + TOLERANCE / 100.0

# Minimum gap between transmissions, in microseconds and in ticks.
GAP_USEC = 5000
GAP_TICKS = GAP_USEC // USECPERTICK

# The detector output is active low.
MARK = 0
SPACE = 1

# Value reported for a repeat code.
REPEAT = 0xFFFFFFFF


class DecodeType(IntEnum):
    """Protocols a decoded code can belong to."""

    UNKNOWN = -1
    UNUSED = 0
    RC5 = 1
    RC6 = 2
    NEC = 3
    SONY = 4
    PANASONIC = 5
    JVC = 6
    SAMSUNG = 7
    WHYNTER = 8
    AIWA_RC_T501 = 9
    LG = 10
    SANYO = 11
    MITSUBISHI = 12
    DISH = 13
    SHARP = 14
    DENON = 15
    PRONTO = 16
    LEGO_PF = 17


class ReceiverState(IntEnum):
    """States of the capture state machine."""

    IDLE = 2
    MARK = 3
    SPACE = 4
    STOP = 5
    OVERFLOW = 6


@dataclass
class DecodeResults:
    """A captured code and, once decoded, what it was decoded to."""

    rawbuf: tuple[int, ...] = ()
    overflow: bool = False
    decode_type: DecodeType = DecodeType.UNKNOWN
    address: int = 0
    value: int = 0
    bits: int = 0

    @property
    def rawlen(self) -> int:
        """Number of intervals recorded in ``rawbuf``."""
        return len(self.rawbuf)


def ticks_low(us: float) -> int:
    """Smallest tick count accepted for a duration of ``us`` microseconds."""
    return int(us * LTOL / USECPERTICK)


def ticks_high(us: float) -> int:
    """Largest tick count accepted for a duration of ``us`` microseconds."""
    return int(us * UTOL / USECPERTICK + 1)


def match(measured: int, desired: int) -> bool:
    """Whether ``measured`` ticks lie within tolerance of ``desired`` microseconds."""
    return ticks_low(desired) <= measured <= ticks_high(desired)


def match_mark(measured_ticks: int, desired_us: int) -> bool:
    """Match a mark, allowing for marks being received too long."""
    return match(measured_ticks, desired_us + MARK_EXCESS)


def match_space(measured_ticks: int, desired_us: int) -> bool:
    """Match a space, allowing for spaces being received too short."""
    return match(measured_ticks, desired_us - MARK_EXCESS)


class CaptureMachine:
    """Records alternating space/mark widths, one detector sample per tick.

    The first recorded entry is the gap before the transmission; after it
    come mark and space widths in ticks. A space longer than the gap marks
    the code as ready.
    """

    def __init__(self) -> None:
        self.state = ReceiverState.IDLE
        self.timer = 0
        self.overflow = False
        self._rawbuf: list[int] = []

    @property
    def rawbuf(self) -> tuple[int, ...]:
        """The intervals recorded so far."""
        return tuple(self._rawbuf)

    def feed(self, level: int) -> None:
        """Process one tick with the detector at ``level`` (MARK or SPACE)."""
        if level not in (MARK, SPACE):
            raise ValueError(f"level must be MARK ({MARK}) or SPACE ({SPACE}), got {level!r}")

        self.timer += 1
        if len(self._rawbuf) >= RAWBUF:
            self.state = ReceiverState.OVERFLOW

        if self.state is ReceiverState.IDLE:
            if level == MARK:
                if self.timer < GAP_TICKS:
                    self.timer = 0
                else:
                    self.overflow = False
                    self._rawbuf = [self.timer]
                    self.timer = 0
                    self.state = ReceiverState.MARK
        elif self.state is ReceiverState.MARK:
            if level == SPACE:
                self._record(ReceiverState.SPACE)
        elif self.state is ReceiverState.SPACE:
            if level == MARK:
                self._record(ReceiverState.MARK)
            elif self.timer > GAP_TICKS:
                self.state = ReceiverState.STOP
        elif self.state is ReceiverState.STOP:
            if level == MARK:
                self.timer = 0
        elif self.state is ReceiverState.OVERFLOW:
            self.overflow = True
            self.state = ReceiverState.STOP

    def _record(self, next_state: ReceiverState) -> None:
        self._rawbuf.append(self.timer)
        self.timer = 0
        self.state = next_state

    def resume(self) -> None:
        """Discard the captured code and start listening again."""
        self.state = ReceiverState.IDLE
        self._rawbuf = []

    def is_idle(self) -> bool:
        """Whether no transmission is currently being recorded."""
        return self.state in (ReceiverState.IDLE, ReceiverState.STOP)

    def is_ready(self) -> bool:
        """Whether a complete code is waiting to be decoded."""
        return self.state is ReceiverState.STOP

    def snapshot(self) -> DecodeResults:
        """The captured intervals and overflow flag as undecoded results."""
        return DecodeResults(rawbuf=self.rawbuf, overflow=self.overflow)