"""LEGO Power Functions infrared bit stream encoding."""

from __future__ import annotations

from homeswitch.irsend import IRSender


class LegoPfBitStreamEncoder:
    """Steps through the marks and pauses of a LEGO Power Functions message.

    Each bit is an IR mark followed by a pause whose length carries the bit.
    A repeated message is sent five times with channel-dependent gaps.
    """

    LOW_BIT_DURATION = 421
    HIGH_BIT_DURATION = 711
    START_BIT_DURATION = 1184
    STOP_BIT_DURATION = 1184
    IR_MARK_DURATION = 158
    HIGH_PAUSE_DURATION = HIGH_BIT_DURATION - IR_MARK_DURATION
    LOW_PAUSE_DURATION = LOW_BIT_DURATION - IR_MARK_DURATION
    START_PAUSE_DURATION = START_BIT_DURATION - IR_MARK_DURATION
    STOP_PAUSE_DURATION = STOP_BIT_DURATION - IR_MARK_DURATION
    MESSAGE_BITS = 18
    MAX_MESSAGE_LENGTH = 16000

    def __init__(self, data: int, repeat_message: bool) -> None:
        self.reset(data, repeat_message)

    def reset(self, data: int, repeat_message: bool) -> None:
        """Start encoding a new 16-bit message."""
        if not 0 <= data <= 0xFFFF:
            raise ValueError(f"data must fit in 16 bits, got {data!r}")
        self.data = data
        self.repeat_message = repeat_message
        self.message_bit_idx = 0
        self.repeat_count = 0
        self._message_length = self.message_length()

    def channel_id(self) -> int:
        """The channel (1 to 4) the message addresses."""
        return 1 + ((self.data >> 12) & 0x3)

    def message_length(self) -> int:
        """Total duration of one message in microseconds."""
        length = self.MESSAGE_BITS * self.IR_MARK_DURATION
        length += self.START_PAUSE_DURATION
        for position in range(15, -1, -1):
            if self.data >> position & 1:
                length += self.HIGH_PAUSE_DURATION
            else:
                length += self.LOW_PAUSE_DURATION
        length += self.STOP_PAUSE_DURATION
        return length

    def next(self) -> bool:
        """Advance to the next bit; False once the transmission is complete."""
        self.message_bit_idx += 1
        if self.message_bit_idx >= self.MESSAGE_BITS:
            self.repeat_count += 1
            self.message_bit_idx = 0
        if self.repeat_count >= 1 and not self.repeat_message:
            return False
        return self.repeat_count < 5

    def mark_duration(self) -> int:
        """Length of the IR mark of the current bit."""
        return self.IR_MARK_DURATION

    def pause_duration(self) -> int:
        """Length of the pause that follows the current bit's mark."""
        if self.message_bit_idx == 0:
            return self.START_PAUSE_DURATION
        if self.message_bit_idx < self.MESSAGE_BITS - 1:
            return self._data_bit_pause()
        return self._stop_pause()

    def _data_bit_pause(self) -> int:
        position = self.MESSAGE_BITS - 2 - self.message_bit_idx
        if self.data >> position & 1:
            return self.HIGH_PAUSE_DURATION
        return self.LOW_PAUSE_DURATION

    def _stop_pause(self) -> int:
        if self.repeat_message:
            return self._repeat_stop_pause()
        return self.STOP_PAUSE_DURATION

    def _repeat_stop_pause(self) -> int:
        if self.repeat_count in (0, 1):
            return (
                self.STOP_PAUSE_DURATION
                + 5 * self.MAX_MESSAGE_LENGTH
                - self._message_length
            )
        if self.repeat_count in (2, 3):
            return (
                self.STOP_PAUSE_DURATION
                + (6 + 2 * self.channel_id()) * self.MAX_MESSAGE_LENGTH
                - self._message_length
            )
        return self.STOP_PAUSE_DURATION


def send_lego_power_functions(sender: IRSender, data: int, repeat: bool = True) -> None:
    """Send a LEGO Power Functions message, repeated five times by default."""
    encoder = LegoPfBitStreamEncoder(data, repeat)
    sender.enable_ir_out(38)
    while True:
        sender.mark(encoder.mark_duration())
        sender.space(encoder.pause_duration())
        if not encoder.next():
            break