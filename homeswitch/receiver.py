"""Receive infrared codes: capture, protocol detection and fallback hashing."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence

from homeswitch.irdecode import (
    decode_aiwa_rc_t501,
    decode_denon,
    decode_jvc,
    decode_lg,
    decode_nec,
    decode_panasonic,
    decode_samsung,
    decode_whynter,
)
from homeswitch.irtiming import CaptureMachine, DecodeResults, DecodeType
from homeswitch.rcdecode import (
    decode_mitsubishi,
    decode_rc5,
    decode_rc6,
    decode_sanyo,
    decode_sony,
)

FNV_PRIME_32 = 16777619
FNV_BASIS_32 = 2166136261
_WORD = 0xFFFFFFFF

# Fewer intervals than this are treated as noise by the hash decoder.
MIN_HASH_SAMPLES = 6

_DECODERS: tuple[Callable[[Sequence[int]], DecodeResults | None], ...] = (
    decode_nec,
    decode_sony,
    decode_sanyo,
    decode_mitsubishi,
    decode_rc5,
    decode_rc6,
    decode_panasonic,
    decode_lg,
    decode_jvc,
    decode_samsung,
    decode_whynter,
    decode_aiwa_rc_t501,
    decode_denon,
)


def compare(oldval: int, newval: int) -> int:
    """0 if ``newval`` is shorter, 1 if about equal, 2 if longer (20% tolerance)."""
    if newval < oldval * 0.8:
        return 0
    if oldval < newval * 0.8:
        return 2
    return 1


def decode_hash(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Hash any code of at least six intervals to a 32-bit FNV value.

    Each mark and each space is compared with the one two entries later, so
    the hash depends only on the shape of the code, not its exact timing.
    """
    if len(rawbuf) < MIN_HASH_SAMPLES:
        return None
    value = FNV_BASIS_32
    for old, new in zip(rawbuf[1:], rawbuf[3:]):
        value = ((value * FNV_PRIME_32) ^ compare(old, new)) & _WORD
    return DecodeResults(
        rawbuf=tuple(rawbuf), decode_type=DecodeType.UNKNOWN, value=value, bits=32
    )


def decode(rawbuf: Sequence[int]) -> DecodeResults | None:
    """Try every protocol in turn, falling back to the hash; None if nothing fits."""
    for decoder in _DECODERS:
        result = decoder(rawbuf)
        if result is not None:
            return result
    return decode_hash(rawbuf)


class IRReceiver:
    """Captures detector samples and decodes completed codes."""

    def __init__(self) -> None:
        self._capture = CaptureMachine()

    def feed(self, level: int) -> None:
        """Process one sampling tick with the detector at ``level``."""
        self._capture.feed(level)

    def decode(self) -> DecodeResults | None:
        """Decode the waiting code, or None if none is ready or it is noise.

        A code that cannot be decoded is discarded and capture restarts.
        """
        if not self._capture.is_ready():
            return None
        captured = self._capture.snapshot()
        result = decode(captured.rawbuf)
        if result is None:
            self.resume()
            return None
        return dataclasses.replace(result, overflow=captured.overflow)

    def is_idle(self) -> bool:
        """Whether no transmission is currently being recorded."""
        return self._capture.is_idle()

    def resume(self) -> None:
        """Discard any captured code and listen for the next one."""
        self._capture.resume()