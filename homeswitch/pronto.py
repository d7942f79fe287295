"""Parse Pronto hex codes and transmit them through an :class:`IRSender`."""

from __future__ import annotations

import re
from dataclasses import dataclass

from homeswitch.irsend import IRSender

# Pronto's crystal gives a carrier period unit of this many microseconds.
PRONTO_TIMEBASE = 0.241246

# The only supported form: oscillated (learned) codes.
PRONTO_OSCILLATED = 0x0000

_HEADER_WORDS = 4
_BLANKS = re.compile(r"[ \t]+")
_WORD = re.compile(r"[0-9A-Fa-f]{4}")


class ProntoError(ValueError):
    """Raised when a Pronto hex string cannot be parsed or sent."""


@dataclass(frozen=True)
class ProntoCode:
    """The words of a Pronto code and the timing derived from its header."""

    words: tuple[int, ...]
    freq_hz: int
    usec: int
    once_len: int
    repeat_len: int

    @property
    def carrier_khz(self) -> int:
        """Carrier frequency in whole kilohertz."""
        return self.freq_hz // 1000

    @property
    def body(self) -> tuple[int, ...]:
        """The burst-pair words that follow the four header words."""
        return self.words[_HEADER_WORDS:]

    def _selection(self, repeat: bool, fallback: bool) -> tuple[int, int]:
        """Number of words to send and how many words to skip first."""
        if fallback:
            if not repeat:
                pairs = self.once_len if self.once_len else self.repeat_len
            else:
                pairs = self.repeat_len if self.repeat_len else self.once_len
            return pairs * 2, 0
        if not repeat:
            return self.once_len * 2, 0
        return self.repeat_len * 2, self.once_len


def parse_pronto(text: str) -> ProntoCode:
    """Parse blocks of four hex digits separated by spaces or tabs."""
    tokens = _BLANKS.split(text.strip(" \t"))
    for token in tokens:
        if not _WORD.fullmatch(token):
            raise ProntoError(f"not a block of four hex digits: {token!r}")
    words = tuple(int(token, 16) for token in tokens)
    if len(words) < _HEADER_WORDS:
        raise ProntoError(f"a Pronto code needs {_HEADER_WORDS} header words, got {len(words)}")

    mode, freq_word, once_len, repeat_len = words[:_HEADER_WORDS]
    if mode != PRONTO_OSCILLATED:
        raise ProntoError(f"only oscillated codes (0000) are supported, got {mode:04X}")
    if freq_word == 0:
        raise ProntoError("frequency word must not be zero")

    freq_hz = int(1_000_000 / (freq_word * PRONTO_TIMEBASE))
    usec = int((1.0 / freq_hz) * 1_000_000 + 0.5)
    return ProntoCode(
        words=words,
        freq_hz=freq_hz,
        usec=usec,
        once_len=once_len,
        repeat_len=repeat_len,
    )


def send_pronto(sender: IRSender, text: str, repeat: bool, fallback: bool) -> None:
    """Send the once or repeat part of a Pronto code.

    With ``fallback`` the other part is sent when the requested one is empty.
    """
    code = parse_pronto(text)
    length, skip = code._selection(repeat, fallback)
    durations = code.body[skip : skip + length]
    if len(durations) < length:
        raise ProntoError(
            f"code holds {len(code.body)} data words, {skip + length} are needed"
        )

    sender.enable_ir_out(code.carrier_khz)
    for index, word in enumerate(durations):
        if index % 2:
            sender.space(word * code.usec)
        else:
            sender.mark(word * code.usec)