import pytest

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
from homeswitch.irsend import AIWA_RC_T501_PRE_DATA, IRSender
from homeswitch.irtiming import REPEAT, DecodeType


def to_rawbuf(sender, gap=200):
    """Convert emitted pulses to received ticks, marks long and spaces short."""
    ticks = [gap]
    for pulse in sender.pulses:
        if pulse.usec == 0:
            continue
        if pulse.mark:
            ticks.append((pulse.usec + 100) // 50)
        else:
            ticks.append((pulse.usec - 100) // 50)
    return tuple(ticks)


def capture(method, *args):
    sender = IRSender()
    getattr(sender, method)(*args)
    return to_rawbuf(sender)


@pytest.mark.parametrize("data", [0x20DF10EF, 0x00000000, 0xFFFFFFFF, 0x80000001])
def test_nec_round_trip(data):
    result = decode_nec(capture("send_nec", data, 32))
    assert result.decode_type is DecodeType.NEC
    assert result.value == data
    assert result.bits == 32


def test_nec_repeat_code():
    rawbuf = (200, (9000 + 100) // 50, (2250 - 100) // 50, (560 + 100) // 50)
    result = decode_nec(rawbuf)
    assert result.decode_type is DecodeType.NEC
    assert result.value == REPEAT
    assert result.bits == 0


def test_nec_too_short_is_rejected():
    rawbuf = capture("send_nec", 0x1234ABCD, 32)
    assert decode_nec(rawbuf[:20]) is None


def test_nec_rejects_bad_bit_space():
    rawbuf = list(capture("send_nec", 0x1234ABCD, 32))
    rawbuf[4] = 100
    assert decode_nec(tuple(rawbuf)) is None


@pytest.mark.parametrize("data", [0xE0E040BF, 0x0F0F0F0F])
def test_samsung_round_trip(data):
    result = decode_samsung(capture("send_samsung", data, 32))
    assert result.decode_type is DecodeType.SAMSUNG
    assert result.value == data
    assert result.bits == 32


def test_samsung_repeat_code():
    rawbuf = (200, (5000 + 100) // 50, (2250 - 100) // 50, (560 + 100) // 50)
    result = decode_samsung(rawbuf)
    assert result.value == REPEAT
    assert result.decode_type is DecodeType.SAMSUNG


def test_nec_and_samsung_do_not_cross_decode():
    assert decode_nec(capture("send_samsung", 0xE0E040BF, 32)) is None
    assert decode_samsung(capture("send_nec", 0x20DF10EF, 32)) is None


@pytest.mark.parametrize("data", [0xC5E8, 0x0001, 0xFFFF])
def test_jvc_round_trip(data):
    result = decode_jvc(capture("send_jvc", data, 16, False))
    assert result.decode_type is DecodeType.JVC
    assert result.value == data
    assert result.bits == 16


def test_jvc_headerless_frame_is_repeat():
    result = decode_jvc(capture("send_jvc", 0xC5E8, 16, True))
    assert result.decode_type is DecodeType.JVC
    assert result.value == REPEAT
    assert result.bits == 0


def test_jvc_missing_stop_bit_is_rejected():
    rawbuf = capture("send_jvc", 0xC5E8, 16, False)
    assert decode_jvc(rawbuf[:-1]) is None


@pytest.mark.parametrize("data", [0x88C0051, 0x0000000, 0xFFFFFFF])
def test_lg_round_trip(data):
    result = decode_lg(capture("send_lg", data, 28))
    assert result.decode_type is DecodeType.LG
    assert result.value == data
    assert result.bits == 28


def test_lg_wrong_header_is_rejected():
    rawbuf = list(capture("send_lg", 0x88C0051, 28))
    rawbuf[1] = 10
    assert decode_lg(tuple(rawbuf)) is None


@pytest.mark.parametrize("data", [0x87654321, 0x00000001])
def test_whynter_round_trip(data):
    result = decode_whynter(capture("send_whynter", data, 32))
    assert result.decode_type is DecodeType.WHYNTER
    assert result.value == data
    assert result.bits == 32


def test_whynter_too_short_is_rejected():
    rawbuf = capture("send_whynter", 0x87654321, 32)
    assert decode_whynter(rawbuf[:60]) is None


@pytest.mark.parametrize("data", [0x2A4C, 0x0000, 0x3FFF])
def test_denon_round_trip(data):
    result = decode_denon(capture("send_denon", data, 14))
    assert result.decode_type is DecodeType.DENON
    assert result.value == data
    assert result.bits == 14


def test_denon_requires_exact_length():
    rawbuf = capture("send_denon", 0x2A4C, 14)
    assert decode_denon(rawbuf + (20,)) is None
    assert decode_denon(rawbuf[:-1]) is None


@pytest.mark.parametrize(
    "address, data", [(0x4004, 0x0100BCBD), (0xFFFF, 0xFFFFFFFF), (0x0000, 0x00000001)]
)
def test_panasonic_round_trip(address, data):
    result = decode_panasonic(capture("send_panasonic", address, data))
    assert result.decode_type is DecodeType.PANASONIC
    assert result.address == address
    assert result.value == data
    assert result.bits == 48


def test_panasonic_truncated_is_rejected():
    rawbuf = capture("send_panasonic", 0x4004, 0x0100BCBD)
    assert decode_panasonic(rawbuf[:50]) is None


def test_aiwa_decodes_sent_code():
    result = decode_aiwa_rc_t501(capture("send_aiwa_rc_t501", 0x12340000))
    assert result.decode_type is DecodeType.AIWA_RC_T501
    assert result.bits == 42
    assert result.value & 0x7FFF == 0x1234
    assert result.value >> 15 == AIWA_RC_T501_PRE_DATA & 0x1FFF


def test_aiwa_too_short_is_rejected():
    rawbuf = capture("send_aiwa_rc_t501", 0x12340000)
    assert decode_aiwa_rc_t501(rawbuf[:80]) is None


def test_decode_keeps_rawbuf():
    rawbuf = capture("send_nec", 0x20DF10EF, 32)
    assert decode_nec(list(rawbuf)).rawbuf == rawbuf


def test_empty_capture_is_rejected():
    results = [
        decode_nec(()),
        decode_samsung(()),
        decode_jvc(()),
        decode_lg(()),
        decode_whynter(()),
        decode_denon(()),
        decode_panasonic(()),
        decode_aiwa_rc_t501(()),
    ]
    assert results == [None] * 8


def test_noise_is_rejected():
    noise = (200,) + (1,) * 90
    results = [
        decode_nec(noise),
        decode_samsung(noise),
        decode_jvc(noise),
        decode_lg(noise),
        decode_whynter(noise),
        decode_denon(noise),
        decode_panasonic(noise),
        decode_aiwa_rc_t501(noise),
    ]
    assert results == [None] * 8