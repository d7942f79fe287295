import pytest

from homeswitch.irsend import IRSender, Pulse


def _read_bits(pulses, one, zero, marks_only=False):
    """Turn a run of bit durations back into an integer."""
    value = 0
    for pulse in pulses:
        if pulse.mark != marks_only:
            continue
        if pulse.usec == one:
            value = value << 1 | 1
        elif pulse.usec == zero:
            value <<= 1
        else:
            raise AssertionError(f"unexpected duration {pulse.usec}")
    return value


@pytest.fixture
def sender():
    return IRSender()


def test_nec_header_carrier_and_footer(sender):
    sender.send_nec(0x20DF10EF, 32)
    assert sender.carrier_khz == 38
    assert sender.pulses[:2] == [Pulse(True, 9000), Pulse(False, 4500)]
    assert sender.pulses[-2:] == [Pulse(True, 560), Pulse(False, 0)]
    assert len(sender.pulses) == 2 + 2 * 32 + 2


def test_nec_data_round_trip(sender):
    sender.send_nec(0x20DF10EF, 32)
    body = sender.pulses[2:-2]
    assert _read_bits(body, 1690, 560) == 0x20DF10EF
    assert all(p.usec == 560 for p in body if p.mark)


def test_marks_and_spaces_alternate_in_nec(sender):
    sender.send_nec(0xA5, 8)
    levels = [p.mark for p in sender.pulses]
    assert levels == [i % 2 == 0 for i in range(len(levels))]


def test_sony_ends_without_zero_space(sender):
    sender.send_sony(0xA90, 12)
    assert sender.carrier_khz == 40
    assert sender.pulses[0] == Pulse(True, 2400)
    assert sender.pulses[-1] == Pulse(False, 600)
    assert _read_bits(sender.pulses[2:], 1200, 600, marks_only=True) == 0xA90


def test_rc5_manchester_bits(sender):
    sender.send_rc5(0b10, 2)
    assert sender.carrier_khz == 36
    assert sender.pulses == [
        Pulse(True, 889), Pulse(False, 889), Pulse(True, 889),
        Pulse(False, 889), Pulse(True, 889),
        Pulse(True, 889), Pulse(False, 889),
        Pulse(False, 0),
    ]


def test_rc6_fourth_bit_is_double_width(sender):
    sender.send_rc6(0xF, 4)
    assert sender.pulses[:4] == [
        Pulse(True, 2666), Pulse(False, 889), Pulse(True, 444), Pulse(False, 444)
    ]
    data = sender.pulses[4:-1]
    assert [p.usec for p in data[:6]] == [444] * 6
    assert [p.usec for p in data[6:]] == [888, 888]
    assert sender.pulses[-1] == Pulse(False, 0)


def test_rc6_zero_bit_is_space_then_mark(sender):
    sender.send_rc6(0, 1)
    assert sender.pulses[4:6] == [Pulse(False, 444), Pulse(True, 444)]


def test_panasonic_address_and_data(sender):
    sender.send_panasonic(0x4004, 0x0100BCBD)
    assert sender.carrier_khz == 35
    assert sender.pulses[:2] == [Pulse(True, 3502), Pulse(False, 1750)]
    body = sender.pulses[2:-2]
    assert len(body) == 2 * 48
    assert _read_bits(body[:32], 1244, 400) == 0x4004
    assert _read_bits(body[32:], 1244, 400) == 0x0100BCBD


def test_jvc_repeat_skips_header(sender):
    sender.send_jvc(0xC5E8, 16, False)
    full = list(sender.pulses)
    sender.clear()
    sender.send_jvc(0xC5E8, 16, True)
    assert full[:2] == [Pulse(True, 8000), Pulse(False, 4000)]
    assert sender.pulses == full[2:]
    assert _read_bits(sender.pulses[:-2], 1600, 550) == 0xC5E8


def test_samsung_round_trip(sender):
    sender.send_samsung(0xE0E040BF, 32)
    assert sender.pulses[:2] == [Pulse(True, 5000), Pulse(False, 5000)]
    assert _read_bits(sender.pulses[2:-2], 1600, 560) == 0xE0E040BF
    assert sender.pulses[-1] == Pulse(False, 0)


def test_whynter_frame(sender):
    sender.send_whynter(0x87654321, 32)
    assert sender.pulses[:4] == [
        Pulse(True, 750), Pulse(False, 750), Pulse(True, 2850), Pulse(False, 2850)
    ]
    assert sender.pulses[-2:] == [Pulse(True, 750), Pulse(False, 750)]
    assert _read_bits(sender.pulses[4:-2], 2150, 750) == 0x87654321


def test_aiwa_prefix_is_fixed(sender):
    sender.send_aiwa_rc_t501(0)
    body = sender.pulses[2:]
    assert sender.pulses[:2] == [Pulse(True, 8800), Pulse(False, 4500)]
    assert _read_bits(body[:52], 600, 1700) == 0x0227EEC0


def test_aiwa_code_bits_come_from_upper_half(sender):
    sender.send_aiwa_rc_t501(0x7FFF0000)
    code_part = sender.pulses[2 + 52:2 + 52 + 30]
    assert _read_bits(code_part, 600, 1700) == 0x7FFF
    sender.clear()
    sender.send_aiwa_rc_t501(0x7FFF)
    code_part = sender.pulses[2 + 52:2 + 52 + 30]
    assert _read_bits(code_part, 600, 1700) == 0
    assert sender.pulses[-4:] == [
        Pulse(True, 500), Pulse(False, 1700), Pulse(True, 500), Pulse(False, 0)
    ]


def test_lg_bits_are_space_then_mark(sender):
    sender.send_lg(0x88C0051, 28)
    assert sender.pulses[:3] == [Pulse(True, 8000), Pulse(False, 4000), Pulse(True, 600)]
    body = sender.pulses[3:-1]
    assert _read_bits(body, 1600, 550) == 0x88C0051
    assert sender.pulses[-1] == Pulse(False, 0)


def test_dish_uses_56khz_and_ends_with_mark(sender):
    sender.send_dish(0x1C10, 16)
    assert sender.carrier_khz == 56
    assert sender.pulses[:2] == [Pulse(True, 400), Pulse(False, 6100)]
    assert sender.pulses[-1] == Pulse(True, 400)
    assert _read_bits(sender.pulses[2:-1], 1700, 2800) == 0x1C10


def test_sharp_raw_sends_three_bursts_with_middle_inverted(sender):
    sender.send_sharp_raw(0x41C2, 15)
    burst = 2 * 15 + 3
    assert len(sender.pulses) == 3 * burst
    bursts = [sender.pulses[i * burst:(i + 1) * burst] for i in range(3)]
    values = [_read_bits(b[:30], 1805, 795) for b in bursts]
    assert values[0] == 0x41C2
    assert values[1] == 0x41C2 ^ 0x3FF
    assert values[2] == 0x41C2
    for b in bursts:
        assert b[-3:] == [Pulse(True, 245), Pulse(False, 795), Pulse(False, 40000)]


def test_sharp_builds_word_from_address_and_command(sender):
    sender.send_sharp(1, 2)
    expected = IRSender()
    expected.send_sharp_raw((1 << 10) | (2 << 2) | 2, 15)
    assert sender.pulses == expected.pulses


def test_denon_round_trip(sender):
    sender.send_denon(0x2A4C, 14)
    assert sender.pulses[:2] == [Pulse(True, 300), Pulse(False, 750)]
    assert _read_bits(sender.pulses[2:-2], 1800, 750) == 0x2A4C
    assert sender.pulses[-2:] == [Pulse(True, 300), Pulse(False, 0)]


def test_send_raw_alternates_and_ends_off(sender):
    sender.send_raw([9000, 4500, 560, 1690], 38)
    assert sender.carrier_khz == 38
    assert sender.pulses == [
        Pulse(True, 9000), Pulse(False, 4500), Pulse(True, 560),
        Pulse(False, 1690), Pulse(False, 0),
    ]


def test_clear_resets_state(sender):
    sender.send_nec(1, 8)
    sender.clear()
    assert sender.pulses == []
    assert sender.carrier_khz is None


@pytest.mark.parametrize("nbits", [0, -1, 33])
def test_invalid_bit_count_rejected(sender, nbits):
    with pytest.raises(ValueError):
        sender.send_nec(1, nbits)


def test_negative_duration_rejected(sender):
    with pytest.raises(ValueError):
        sender.mark(-1)
    with pytest.raises(ValueError):
        sender.space(-5)


def test_non_positive_carrier_rejected(sender):
    with pytest.raises(ValueError):
        sender.enable_ir_out(0)