"""Decoders for pulse-distance infrared protocols.

Each decoder takes the captured intervals in ticks, with the gap before the
transmission as the first entry, and returns :class:`DecodeResults` when the
intervals form a valid code of its protocol, or ``None`` when they do not.
"""

from __future__ import annotations

from collections.abc import Sequence

from homeswitch.irtiming import (
    REPEAT,
    DecodeResults,
    DecodeType,
    match_mark,
    match_space,
)

_WORD = 0xFFFFFFFF

NEC_BITS = 32
NEC_HDR_MARK = 9000
NEC_HDR_SPACE = 4500
NEC_BIT_MARK = 560
NEC_ONE_SPACE = 1690
NEC_ZERO_SPACE = 560
NEC_RPT_SPACE = 2250

SAMSUNG_BITS = 32
SAMSUNG_HDR_MARK = 5000
SAMSUNG_HDR_SPACE = 5000
SAMSUNG_BIT_MARK = 560
SAMSUNG_ONE_SPACE = 1600
SAMSUNG_ZERO_SPACE = 560
SAMSUNG_RPT_SPACE = 2250

JVC_BITS = 16
JVC_HDR_MARK = 8000
JVC_HDR_SPACE = 4000
JVC_BIT_MARK = 600
JVC_ONE_SPACE = 1600
JVC_ZERO_SPACE = 550

LG_BITS = 28
LG_HDR_MARK = 8000
LG_HDR_SPACE = 4000
LG_BIT_MARK = 600
LG_ONE_SPACE = 1600
LG_ZERO_SPACE = 550

WHYNTER_BITS = 32
WHYNTER_HDR_MARK = 2850
WHYNTER_HDR_SPACE = 2850
WHYNTER_BIT_MARK = 750
WHYNTER_ONE_SPACE = 2150
WHYNTER_ZERO_SPACE = 750

DENON_BITS = 14
DENON_HDR_MARK = 300
DENON_HDR_SPACE = 750
DENON_BIT_MARK = 300
DENON_ONE_SPACE = 1800
DENON_ZERO_SPACE = 750

PANASONIC_BITS = 48
PANASONIC_HDR_MARK = 3502
PANASONIC_HDR_SPACE = 1750
PANASONIC_BIT_MARK = 502
PANASONIC_ONE_SPACE = 1244
PANASONIC_ZERO_SPACE = 400

AIWA_RC_T501_BITS = 15
AIWA_RC_T501_PRE_BITS = 26
AIWA_RC_T501_POST_BITS = 1
AIWA_RC_T501_SUM_BITS = AIWA_RC_T501_PRE_BITS + AIWA_RC_T501_BITS + AIWA_RC_T501_POST_BITS
AIWA_RC_T501_HDR_MARK = 8800
AIWA_RC_T501_HDR_SPACE = 4500
AIWA_RC_T501_BIT_MARK = 500
AIWA_RC_T501_ONE_SPACE = 600
AIWA_RC_T501_ZERO_SPACE = 1700


def _is_mark(rawbuf: Sequence[int], index: int, desired_us: int) -> bool:
    return 0 <= index < len(rawbuf) and match_mark(rawbuf[index], desired_us)


def _is_space(rawbuf: Sequence[int], index: int, desired_us: int) -> bool:
    return 0 <= index < len(rawbuf) and match_space(rawbuf[index], desired_us)


def _space_bit(
    rawbuf: Sequence[int], index: int, one_space: int, zero_space: int
) -> int | None:
    """The bit a space encodes, or None if it matches neither width."""
    if _is_space(rawbuf, index, one_space):
        return 1
    if _is_space(rawbuf, index, zero_space):
        return 0
    return None


def _read_bits(
    rawbuf: Sequence[int],
    offset: int,
    nbits: int,
    bit_mark: int,
    one_space: int,
    zero_space: int,
) -> tuple[int, int] | None:
    """Read ``nbits`` mark/space pairs, most significant bit first.

    Returns the data and the offset after the last pair, or None on a
    malformed interval.
    """
    data = 0
    for _ in range(nbits):
        if not _is_mark(rawbuf, offset, bit_mark):
            return None
        offset += 1
        bit = _space_bit(rawbuf, offset, one_space, zero_space)
        if bit is None:
            return None
        data = (data << 1) | bit
        offset += 1
    return data, offset


def _result(
    rawbuf: Sequence[int],
    decode_type: DecodeType,
    value: int,
    bits: int,
    address: int = 0,
) -> DecodeResults:
    return DecodeResults(
        rawbuf=tuple(rawbuf),
        decode_type=decode_type,
        value=value,
        bits=bits,
        address=address,
    )


def _decode_nec_like(
    rawbuf: Sequence[int],
    decode_type: DecodeType,
    nbits: int,
    hdr_mark: int,
    hdr_space: int,
    rpt_space: int,
    bit_mark: int,
    one_space: int,
    zero_space: int,
) -> DecodeResults | None:
    if not _is_mark(rawbuf, 1, hdr_mark):
        return None
    if (
        len(rawbuf) == 4
        and _is_space(rawbuf, 2, rpt_space)
        and _is_mark(rawbuf, 3, bit_mark)
    ):
        return _result(rawbuf, decode_type, REPEAT, 0)
    if len(rawbuf) < 2 * nbits + 4:
        return None
    if not _is_space(rawbuf, 2, hdr_space):
        return None
    read = _read_bits(rawbuf, 3, nbits, bit_mark, one_space, zero_space)
    if read is None:
        return None
    data, _ = read
    return _result(rawbuf, decode_type, data & _WORD, nbits)


def decode_nec(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode an NEC code or NEC repeat code."""
    return _decode_nec_like(
        rawbuf,
        DecodeType.NEC,
        NEC_BITS,
        NEC_HDR_MARK,
        NEC_HDR_SPACE,
        NEC_RPT_SPACE,
        NEC_BIT_MARK,
        NEC_ONE_SPACE,
        NEC_ZERO_SPACE,
    )


def decode_samsung(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a Samsung code or Samsung repeat code."""
    return _decode_nec_like(
        rawbuf,
        DecodeType.SAMSUNG,
        SAMSUNG_BITS,
        SAMSUNG_HDR_MARK,
        SAMSUNG_HDR_SPACE,
        SAMSUNG_RPT_SPACE,
        SAMSUNG_BIT_MARK,
        SAMSUNG_ONE_SPACE,
        SAMSUNG_ZERO_SPACE,
    )


def decode_jvc(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a JVC code; a headerless 16-bit frame is reported as a repeat."""
    rawlen = len(rawbuf)
    if (
        rawlen - 1 == 33
        and _is_mark(rawbuf, 1, JVC_BIT_MARK)
        and _is_mark(rawbuf, rawlen - 1, JVC_BIT_MARK)
    ):
        return _result(rawbuf, DecodeType.JVC, REPEAT, 0)
    if not _is_mark(rawbuf, 1, JVC_HDR_MARK):
        return None
    if rawlen < 2 * JVC_BITS + 1:
        return None
    if not _is_space(rawbuf, 2, JVC_HDR_SPACE):
        return None
    read = _read_bits(rawbuf, 3, JVC_BITS, JVC_BIT_MARK, JVC_ONE_SPACE, JVC_ZERO_SPACE)
    if read is None:
        return None
    data, offset = read
    if not _is_mark(rawbuf, offset, JVC_BIT_MARK):
        return None
    return _result(rawbuf, DecodeType.JVC, data & _WORD, JVC_BITS)


def decode_lg(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a 28-bit LG code."""
    if len(rawbuf) < 2 * LG_BITS + 1:
        return None
    if not _is_mark(rawbuf, 1, LG_HDR_MARK):
        return None
    if not _is_space(rawbuf, 2, LG_HDR_SPACE):
        return None
    read = _read_bits(rawbuf, 3, LG_BITS, LG_BIT_MARK, LG_ONE_SPACE, LG_ZERO_SPACE)
    if read is None:
        return None
    data, offset = read
    if not _is_mark(rawbuf, offset, LG_BIT_MARK):
        return None
    return _result(rawbuf, DecodeType.LG, data & _WORD, LG_BITS)


def decode_whynter(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a 32-bit Whynter air-conditioner code."""
    if len(rawbuf) < 2 * WHYNTER_BITS + 6:
        return None
    if not _is_mark(rawbuf, 1, WHYNTER_BIT_MARK):
        return None
    if not _is_space(rawbuf, 2, WHYNTER_ZERO_SPACE):
        return None
    if not _is_mark(rawbuf, 3, WHYNTER_HDR_MARK):
        return None
    if not _is_space(rawbuf, 4, WHYNTER_HDR_SPACE):
        return None
    read = _read_bits(
        rawbuf, 5, WHYNTER_BITS, WHYNTER_BIT_MARK, WHYNTER_ONE_SPACE, WHYNTER_ZERO_SPACE
    )
    if read is None:
        return None
    data, offset = read
    if not _is_mark(rawbuf, offset, WHYNTER_BIT_MARK):
        return None
    return _result(rawbuf, DecodeType.WHYNTER, data & _WORD, WHYNTER_BITS)


def decode_denon(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a 14-bit Denon code; the capture must have exactly the right length."""
    if len(rawbuf) != 1 + 2 + 2 * DENON_BITS + 1:
        return None
    if not _is_mark(rawbuf, 1, DENON_HDR_MARK):
        return None
    if not _is_space(rawbuf, 2, DENON_HDR_SPACE):
        return None
    read = _read_bits(
        rawbuf, 3, DENON_BITS, DENON_BIT_MARK, DENON_ONE_SPACE, DENON_ZERO_SPACE
    )
    if read is None:
        return None
    data, _ = read
    return _result(rawbuf, DecodeType.DENON, data & _WORD, DENON_BITS)


def decode_panasonic(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode a 48-bit Panasonic code into a 16-bit address and 32-bit value."""
    if not _is_mark(rawbuf, 1, PANASONIC_HDR_MARK):
        return None
    # The header space is checked with mark tolerance.
    if not _is_mark(rawbuf, 2, PANASONIC_HDR_SPACE):
        return None
    read = _read_bits(
        rawbuf,
        3,
        PANASONIC_BITS,
        PANASONIC_BIT_MARK,
        PANASONIC_ONE_SPACE,
        PANASONIC_ZERO_SPACE,
    )
    if read is None:
        return None
    data, _ = read
    return _result(
        rawbuf,
        DecodeType.PANASONIC,
        data & _WORD,
        PANASONIC_BITS,
        address=(data >> 32) & 0xFFFF,
    )


def decode_aiwa_rc_t501(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Decode an Aiwa RC-T501 code.

    Part of the pre-data is skipped; the remaining pairs up to four entries
    before the end are read as bits, and at least 42 bits must be seen.
    """
    rawlen = len(rawbuf)
    if rawlen < 2 * AIWA_RC_T501_SUM_BITS + 4:
        return None
    if not _is_mark(rawbuf, 1, AIWA_RC_T501_HDR_MARK):
        return None
    if not _is_space(rawbuf, 2, AIWA_RC_T501_HDR_SPACE):
        return None

    data = 0
    offset = 3 + 26
    while offset < rawlen - 4:
        if not _is_mark(rawbuf, offset, AIWA_RC_T501_BIT_MARK):
            return None
        offset += 1
        bit = _space_bit(rawbuf, offset, AIWA_RC_T501_ONE_SPACE, AIWA_RC_T501_ZERO_SPACE)
        if bit is None:
            break
        data = ((data << 1) | bit) & _WORD
        offset += 1

    bits = (offset - 1) // 2
    if bits < 42:
        return None
    return _result(rawbuf, DecodeType.AIWA_RC_T501, data, bits)