"""Decoders for RC5, RC6, Sony, Sanyo and Mitsubishi infrared codes.

Each decoder takes the captured intervals in ticks, with the gap before the
transmission as the first entry, and returns :class:`DecodeResults` when the
intervals form a valid code of its protocol, or ``None`` when they do not.
"""

from __future__ import annotations

from collections.abc import Sequence

from homeswitch.irtiming import (
    MARK,
    MARK_EXCESS,
    REPEAT,
    SPACE,
    DecodeResults,
    DecodeType,
    match,
    match_mark,
    match_space,
)

_WORD = 0xFFFFFFFF

MIN_RC5_SAMPLES = 11
RC5_T1 = 889

MIN_RC6_SAMPLES = 1
RC6_HDR_MARK = 2666
RC6_HDR_SPACE = 889
RC6_T1 = 444

SONY_BITS = 12
SONY_HDR_MARK = 2400
SONY_HDR_SPACE = 600
SONY_ONE_MARK = 1200
SONY_ZERO_MARK = 600
# Compared directly with the gap entry, which is held in ticks.
SONY_DOUBLE_SPACE_USECS = 500

SANYO_BITS = 12
SANYO_HDR_MARK = 3500
SANYO_HDR_SPACE = 950
SANYO_ONE_MARK = 2400
SANYO_ZERO_MARK = 700
SANYO_DOUBLE_SPACE_USECS = 800

MITSUBISHI_BITS = 16
MITSUBISHI_HDR_SPACE = 350
MITSUBISHI_ONE_MARK = 1950
MITSUBISHI_ZERO_MARK = 750


def _is_mark(rawbuf: Sequence[int], index: int, desired_us: int) -> bool:
    return 0 <= index < len(rawbuf) and match_mark(rawbuf[index], desired_us)


def _is_space(rawbuf: Sequence[int], index: int, desired_us: int) -> bool:
    return 0 <= index < len(rawbuf) and match_space(rawbuf[index], desired_us)


def _result(
    rawbuf: Sequence[int], decode_type: DecodeType, value: int, bits: int
) -> DecodeResults:
    return DecodeResults(
        rawbuf=tuple(rawbuf), decode_type=decode_type, value=value, bits=bits
    )


class _LevelReader:
    """Yields one bit-time level at a time from Manchester-coded intervals.

    An interval one, two or three bit-times wide yields its level that many
    times. Odd entries of the buffer are marks, even entries spaces.
    """

    def __init__(self, rawbuf: Sequence[int], t1: int, offset: int) -> None:
        self.rawbuf = rawbuf
        self.t1 = t1
        self.offset = offset
        self.used = 0

    def next(self) -> int | None:
        """The next level, SPACE past the end, or None for a bad width."""
        if self.offset >= len(self.rawbuf):
            return SPACE
        width = self.rawbuf[self.offset]
        level = MARK if self.offset % 2 else SPACE
        correction = MARK_EXCESS if level == MARK else -MARK_EXCESS

        for avail in (1, 2, 3):
            if match(width, avail * self.t1 + correction):
                break
        else:
            return None

        self.used += 1
        if self.used >= avail:
            self.used = 0
            self.offset += 1
        return level


def decode_rc5(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode an RC5 code; the start bits must be mark, space, mark."""
    if len(rawbuf) < MIN_RC5_SAMPLES + 2:
        return None
    reader = _LevelReader(rawbuf, RC5_T1, 1)
    for expected in (MARK, SPACE, MARK):
        if reader.next() != expected:
            return None

    data = 0
    nbits = 0
    while reader.offset < len(rawbuf):
        pair = (reader.next(), reader.next())
        if pair == (SPACE, MARK):
            bit = 1
        elif pair == (MARK, SPACE):
            bit = 0
        else:
            return None
        data = ((data << 1) | bit) & _WORD
        nbits += 1
    return _result(rawbuf, DecodeType.RC5, data, nbits)


def decode_rc6(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode an RC6 code; the fourth bit is the double-width trailer bit."""
    if len(rawbuf) < MIN_RC6_SAMPLES:
        return None
    if not _is_mark(rawbuf, 1, RC6_HDR_MARK):
        return None
    if not _is_space(rawbuf, 2, RC6_HDR_SPACE):
        return None
    reader = _LevelReader(rawbuf, RC6_T1, 3)
    for expected in (MARK, SPACE):
        if reader.next() != expected:
            return None

    data = 0
    nbits = 0
    while reader.offset < len(rawbuf):
        level_a = reader.next()
        if nbits == 3 and level_a != reader.next():
            return None
        level_b = reader.next()
        if nbits == 3 and level_b != reader.next():
            return None
        if (level_a, level_b) == (MARK, SPACE):
            bit = 1
        elif (level_a, level_b) == (SPACE, MARK):
            bit = 0
        else:
            return None
        data = ((data << 1) | bit) & _WORD
        nbits += 1
    return _result(rawbuf, DecodeType.RC6, data, nbits)


def _read_pulse_width(
    rawbuf: Sequence[int],
    offset: int,
    hdr_space: int,
    one_mark: int,
    zero_mark: int,
) -> tuple[int, int] | None:
    """Read space/mark pairs whose mark width carries the bit.

    Stops at the first space that does not match; returns the data and the
    final offset, or None on a mark that matches neither width.
    """
    data = 0
    while offset + 1 < len(rawbuf):
        space_ok = match_space(rawbuf[offset], hdr_space)
        offset += 1
        if not space_ok:
            break
        if match_mark(rawbuf[offset], one_mark):
            bit = 1
        elif match_mark(rawbuf[offset], zero_mark):
            bit = 0
        else:
            return None
        data = ((data << 1) | bit) & _WORD
        offset += 1
    return data, offset


def decode_sony(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a Sony code; a short gap before it is reported as a repeat."""
    if len(rawbuf) < 2 * SONY_BITS + 2:
        return None
    if rawbuf[0] < SONY_DOUBLE_SPACE_USECS:
        return _result(rawbuf, DecodeType.SANYO, REPEAT, 0)
    if not _is_mark(rawbuf, 1, SONY_HDR_MARK):
        return None
    read = _read_pulse_width(rawbuf, 2, SONY_HDR_SPACE, SONY_ONE_MARK, SONY_ZERO_MARK)
    if read is None:
        return None
    data, offset = read
    bits = (offset - 1) // 2
    if bits < 12:
        return None
    return _result(rawbuf, DecodeType.SONY, data, bits)


def decode_sanyo(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a Sanyo code; a short gap before it is reported as a repeat."""
    if len(rawbuf) < 2 * SANYO_BITS + 2:
        return None
    if rawbuf[0] < SANYO_DOUBLE_SPACE_USECS:
        return _result(rawbuf, DecodeType.SANYO, REPEAT, 0)
    if not _is_mark(rawbuf, 1, SANYO_HDR_MARK):
        return None
    if not _is_mark(rawbuf, 2, SANYO_HDR_MARK):
        return None
    read = _read_pulse_width(
        rawbuf, 3, SANYO_HDR_SPACE, SANYO_ONE_MARK, SANYO_ZERO_MARK
    )
    if read is None:
        return None
    data, offset = read
    bits = (offset - 1) // 2
    if bits < 12:
        return None
    return _result(rawbuf, DecodeType.SANYO, data, bits)


def decode_mitsubishi(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a Mitsubishi code of at least 16 bits."""
    rawlen = len(rawbuf)
    if rawlen < 2 * MITSUBISHI_BITS + 2:
        return None
    if not _is_mark(rawbuf, 1, MITSUBISHI_HDR_SPACE):
        return None

    data = 0
    offset = 2
    while offset + 1 < rawlen:
        if match_mark(rawbuf[offset], MITSUBISHI_ONE_MARK):
            bit = 1
        elif match_mark(rawbuf[offset], MITSUBISHI_ZERO_MARK):
            bit = 0
        else:
            return None
        data = ((data << 1) | bit) & _WORD
        offset += 1
        if not match_space(rawbuf[offset], MITSUBISHI_HDR_SPACE):
            break
        offset += 1

    bits = (offset - 1) // 2
    if bits < MITSUBISHI_BITS:
        return None
    return _result(rawbuf, DecodeType.MITSUBISHI, data, bits)