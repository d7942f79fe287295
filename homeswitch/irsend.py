"""Build the mark/space sequences that infrared remote protocols transmit.

An :class:`IRSender` records every mark (carrier on) and space (carrier off)
it is asked to emit, in microseconds, together with the carrier frequency.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

# Widest data word the protocols accept.
MAX_BITS = 32

NEC_HDR_MARK = 9000
NEC_HDR_SPACE = 4500
NEC_BIT_MARK = 560
NEC_ONE_SPACE = 1690
NEC_ZERO_SPACE = 560

SONY_HDR_MARK = 2400
SONY_HDR_SPACE = 600
SONY_ONE_MARK = 1200
SONY_ZERO_MARK = 600

RC5_T1 = 889

RC6_HDR_MARK = 2666
RC6_HDR_SPACE = 889
RC6_T1 = 444

PANASONIC_HDR_MARK = 3502
PANASONIC_HDR_SPACE = 1750
PANASONIC_BIT_MARK = 502
PANASONIC_ONE_SPACE = 1244
PANASONIC_ZERO_SPACE = 400

JVC_HDR_MARK = 8000
JVC_HDR_SPACE = 4000
JVC_BIT_MARK = 600
JVC_ONE_SPACE = 1600
JVC_ZERO_SPACE = 550

SAMSUNG_HDR_MARK = 5000
SAMSUNG_HDR_SPACE = 5000
SAMSUNG_BIT_MARK = 560
SAMSUNG_ONE_SPACE = 1600
SAMSUNG_ZERO_SPACE = 560

WHYNTER_HDR_MARK = 2850
WHYNTER_HDR_SPACE = 2850
WHYNTER_ONE_MARK = 750
WHYNTER_ONE_SPACE = 2150
WHYNTER_ZERO_MARK = 750
WHYNTER_ZERO_SPACE = 750

AIWA_RC_T501_HZ = 38
AIWA_RC_T501_PRE_DATA = 0x0227EEC0
AIWA_RC_T501_PRE_BITS = 26
AIWA_RC_T501_CODE_BITS = 15
AIWA_RC_T501_HDR_MARK = 8800
AIWA_RC_T501_HDR_SPACE = 4500
AIWA_RC_T501_BIT_MARK = 500
AIWA_RC_T501_ONE_SPACE = 600
AIWA_RC_T501_ZERO_SPACE = 1700

LG_HDR_MARK = 8000
LG_HDR_SPACE = 4000
LG_BIT_MARK = 600
LG_ONE_SPACE = 1600
LG_ZERO_SPACE = 550

DISH_HDR_MARK = 400
DISH_HDR_SPACE = 6100
DISH_BIT_MARK = 400
DISH_ONE_SPACE = 1700
DISH_ZERO_SPACE = 2800

SHARP_BITS = 15
SHARP_BIT_MARK = 245
SHARP_ONE_SPACE = 1805
SHARP_ZERO_SPACE = 795
SHARP_TOGGLE_MASK = 0x3FF
SHARP_BURST_DELAY_USEC = 40_000

DENON_HDR_MARK = 300
DENON_HDR_SPACE = 750
DENON_BIT_MARK = 300
DENON_ONE_SPACE = 1800
DENON_ZERO_SPACE = 750

_WORD = 0xFFFFFFFF
_TOP_BIT = 0x80000000


@dataclass(frozen=True)
class Pulse:
    """One emitted interval: carrier on (``mark``) or off, for ``usec`` microseconds."""

    mark: bool
    usec: int


def _bits(data: int, nbits: int) -> Iterator[bool]:
    """The lowest ``nbits`` bits of ``data``, most significant first."""
    if not 1 <= nbits <= MAX_BITS:
        raise ValueError(f"nbits must be between 1 and {MAX_BITS}, got {nbits}")
    for position in range(nbits - 1, -1, -1):
        yield bool(data >> position & 1)


class IRSender:
    """Records the pulse train produced by each protocol's send routine."""

    def __init__(self) -> None:
        self.pulses: list[Pulse] = []
        self.carrier_khz: int | None = None

    def clear(self) -> None:
        """Forget all recorded pulses and the carrier frequency."""
        self.pulses = []
        self.carrier_khz = None

    def enable_ir_out(self, khz: int) -> None:
        """Set the carrier modulation frequency in kilohertz."""
        if khz <= 0:
            raise ValueError(f"carrier frequency must be positive, got {khz}")
        self.carrier_khz = khz

    def mark(self, usec: int) -> None:
        """Emit the modulated carrier for ``usec`` microseconds."""
        self._emit(True, usec)

    def space(self, usec: int) -> None:
        """Leave the output off for ``usec`` microseconds."""
        self._emit(False, usec)

    def _emit(self, mark: bool, usec: int) -> None:
        if usec < 0:
            raise ValueError(f"duration must not be negative, got {usec}")
        self.pulses.append(Pulse(mark, usec))

    def _send_pulse_distance(
        self, data: int, nbits: int, bit_mark: int, one_space: int, zero_space: int
    ) -> None:
        for bit in _bits(data, nbits):
            self.mark(bit_mark)
            self.space(one_space if bit else zero_space)

    def send_raw(self, buf: Iterable[int], hz: int) -> None:
        """Send alternating mark and space durations, starting with a mark."""
        self.enable_ir_out(hz)
        for index, usec in enumerate(buf):
            if index % 2:
                self.space(usec)
            else:
                self.mark(usec)
        self.space(0)

    def send_nec(self, data: int, nbits: int) -> None:
        """Send an NEC code."""
        self.enable_ir_out(38)
        self.mark(NEC_HDR_MARK)
        self.space(NEC_HDR_SPACE)
        self._send_pulse_distance(data, nbits, NEC_BIT_MARK, NEC_ONE_SPACE, NEC_ZERO_SPACE)
        self.mark(NEC_BIT_MARK)
        self.space(0)

    def send_sony(self, data: int, nbits: int) -> None:
        """Send a Sony code; the train ends with the output already off."""
        self.enable_ir_out(40)
        self.mark(SONY_HDR_MARK)
        self.space(SONY_HDR_SPACE)
        for bit in _bits(data, nbits):
            self.mark(SONY_ONE_MARK if bit else SONY_ZERO_MARK)
            self.space(SONY_HDR_SPACE)

    def send_rc5(self, data: int, nbits: int) -> None:
        """Send an RC5 code (Manchester coded, a one is space then mark)."""
        self.enable_ir_out(36)
        self.mark(RC5_T1)
        self.space(RC5_T1)
        self.mark(RC5_T1)
        for bit in _bits(data, nbits):
            if bit:
                self.space(RC5_T1)
                self.mark(RC5_T1)
            else:
                self.mark(RC5_T1)
                self.space(RC5_T1)
        self.space(0)

    def send_rc6(self, data: int, nbits: int) -> None:
        """Send an RC6 code; the fourth bit is the double-width trailer bit."""
        self.enable_ir_out(36)
        self.mark(RC6_HDR_MARK)
        self.space(RC6_HDR_SPACE)
        self.mark(RC6_T1)
        self.space(RC6_T1)
        for number, bit in enumerate(_bits(data, nbits), start=1):
            width = RC6_T1 * 2 if number == 4 else RC6_T1
            if bit:
                self.mark(width)
                self.space(width)
            else:
                self.space(width)
                self.mark(width)
        self.space(0)

    def send_panasonic(self, address: int, data: int) -> None:
        """Send a Panasonic code: a 16-bit address then 32 bits of data."""
        self.enable_ir_out(35)
        self.mark(PANASONIC_HDR_MARK)
        self.space(PANASONIC_HDR_SPACE)
        self._send_pulse_distance(
            address, 16, PANASONIC_BIT_MARK, PANASONIC_ONE_SPACE, PANASONIC_ZERO_SPACE
        )
        self._send_pulse_distance(
            data, 32, PANASONIC_BIT_MARK, PANASONIC_ONE_SPACE, PANASONIC_ZERO_SPACE
        )
        self.mark(PANASONIC_BIT_MARK)
        self.space(0)

    def send_jvc(self, data: int, nbits: int, repeat: bool) -> None:
        """Send a JVC code; a repeat is the same code without the header."""
        self.enable_ir_out(38)
        if not repeat:
            self.mark(JVC_HDR_MARK)
            self.space(JVC_HDR_SPACE)
        self._send_pulse_distance(data, nbits, JVC_BIT_MARK, JVC_ONE_SPACE, JVC_ZERO_SPACE)
        self.mark(JVC_BIT_MARK)
        self.space(0)

    def send_samsung(self, data: int, nbits: int) -> None:
        """Send a Samsung code."""
        self.enable_ir_out(38)
        self.mark(SAMSUNG_HDR_MARK)
        self.space(SAMSUNG_HDR_SPACE)
        self._send_pulse_distance(
            data, nbits, SAMSUNG_BIT_MARK, SAMSUNG_ONE_SPACE, SAMSUNG_ZERO_SPACE
        )
        self.mark(SAMSUNG_BIT_MARK)
        self.space(0)

    def send_whynter(self, data: int, nbits: int) -> None:
        """Send a Whynter air-conditioner code."""
        self.enable_ir_out(38)
        self.mark(WHYNTER_ZERO_MARK)
        self.space(WHYNTER_ZERO_SPACE)
        self.mark(WHYNTER_HDR_MARK)
        self.space(WHYNTER_HDR_SPACE)
        for bit in _bits(data, nbits):
            if bit:
                self.mark(WHYNTER_ONE_MARK)
                self.space(WHYNTER_ONE_SPACE)
            else:
                self.mark(WHYNTER_ZERO_MARK)
                self.space(WHYNTER_ZERO_SPACE)
        self.mark(WHYNTER_ZERO_MARK)
        self.space(WHYNTER_ZERO_SPACE)

    def send_aiwa_rc_t501(self, code: int) -> None:
        """Send an Aiwa RC-T501 code.

        After the fixed 26-bit prefix, 15 code bits are sent, taken from bit
        30 down to bit 16 of ``code`` as a 32-bit word.
        """
        self.enable_ir_out(AIWA_RC_T501_HZ)
        self.mark(AIWA_RC_T501_HDR_MARK)
        self.space(AIWA_RC_T501_HDR_SPACE)
        self._send_pulse_distance(
            AIWA_RC_T501_PRE_DATA,
            AIWA_RC_T501_PRE_BITS,
            AIWA_RC_T501_BIT_MARK,
            AIWA_RC_T501_ONE_SPACE,
            AIWA_RC_T501_ZERO_SPACE,
        )
        word = (code << 1) & _WORD
        for _ in range(AIWA_RC_T501_CODE_BITS):
            self.mark(AIWA_RC_T501_BIT_MARK)
            self.space(AIWA_RC_T501_ONE_SPACE if word & _TOP_BIT else AIWA_RC_T501_ZERO_SPACE)
            word = (word << 1) & _WORD
        self.mark(AIWA_RC_T501_BIT_MARK)
        self.space(AIWA_RC_T501_ZERO_SPACE)
        self.mark(AIWA_RC_T501_BIT_MARK)
        self.space(0)

    def send_lg(self, data: int, nbits: int) -> None:
        """Send an LG code; each bit is a space followed by a mark."""
        self.enable_ir_out(38)
        self.mark(LG_HDR_MARK)
        self.space(LG_HDR_SPACE)
        self.mark(LG_BIT_MARK)
        for bit in _bits(data, nbits):
            self.space(LG_ONE_SPACE if bit else LG_ZERO_SPACE)
            self.mark(LG_BIT_MARK)
        self.space(0)

    def send_dish(self, data: int, nbits: int) -> None:
        """Send a DISH Network code (send it four times for a key press)."""
        self.enable_ir_out(56)
        self.mark(DISH_HDR_MARK)
        self.space(DISH_HDR_SPACE)
        self._send_pulse_distance(data, nbits, DISH_BIT_MARK, DISH_ONE_SPACE, DISH_ZERO_SPACE)
        self.mark(DISH_HDR_MARK)

    def send_sharp_raw(self, data: int, nbits: int) -> None:
        """Send a Sharp code as three bursts: normal, inverted, normal."""
        self.enable_ir_out(38)
        for _ in range(3):
            self._send_pulse_distance(
                data, nbits, SHARP_BIT_MARK, SHARP_ONE_SPACE, SHARP_ZERO_SPACE
            )
            self.mark(SHARP_BIT_MARK)
            self.space(SHARP_ZERO_SPACE)
            self.space(SHARP_BURST_DELAY_USEC)
            data ^= SHARP_TOGGLE_MASK

    def send_sharp(self, address: int, command: int) -> None:
        """Send a Sharp code built from an address and a command."""
        self.send_sharp_raw((address << 10) | (command << 2) | 2, SHARP_BITS)

    def send_denon(self, data: int, nbits: int) -> None:
        """Send a Denon code."""
        self.enable_ir_out(38)
        self.mark(DENON_HDR_MARK)
        self.space(DENON_HDR_SPACE)
        self._send_pulse_distance(
            data, nbits, DENON_BIT_MARK, DENON_ONE_SPACE, DENON_ZERO_SPACE
        )
        self.mark(DENON_BIT_MARK)
        self.space(0)