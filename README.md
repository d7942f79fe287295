# homeswitch

Tools for a small home-automation setup, in two parts:

- **Infrared remote control.** Build the mark/space pulse trains of common
  remote protocols (NEC, Sony, RC5, RC6, Panasonic, JVC, Samsung, Whynter,
  Aiwa RC-T501, LG, DISH, Sharp, Denon, LEGO Power Functions and Pronto hex),
  and decode captured pulse timings back into protocol values.
- **Voice-assistant switches.** Emulate WeMo-style sockets that answer SSDP
  discovery and accept on/off requests over HTTP.

The package uses only the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Sending infrared codes

`homeswitch.irsend.IRSender` records what would be transmitted: the carrier
frequency in kilohertz (`carrier_khz`) and a list of `Pulse` values in
`pulses`. Each pulse is a mark (carrier on) or a space (carrier off), with a
duration in microseconds.

```python
from homeswitch.irsend import IRSender

sender = IRSender()
sender.send_nec(0x20DF10EF, 32)
print(sender.carrier_khz)
for pulse in sender.pulses:
    print(pulse.mark, pulse.usec)
sender.clear()
```

The senders are `send_raw`, `send_nec`, `send_sony`, `send_rc5`, `send_rc6`,
`send_panasonic`, `send_jvc`, `send_samsung`, `send_whynter`,
`send_aiwa_rc_t501`, `send_lg`, `send_dish`, `send_sharp_raw`, `send_sharp`
and `send_denon`. Those that take `nbits` accept 1 to 32 bits. They raise
`ValueError` for any other width, and also for a negative duration or a
carrier frequency that is not positive. Pulses are appended to the list, so
call `clear()` between codes.

Pronto hex codes and LEGO Power Functions messages go through the same sender:

```python
from homeswitch.pronto import parse_pronto, send_pronto
from homeswitch.lego_pf import LegoPfBitStreamEncoder, send_lego_power_functions

code = parse_pronto("0000 006D 0001 0000 0010 0020")
print(code.freq_hz, code.carrier_khz, code.usec, code.once_len, code.repeat_len)

send_pronto(sender, "0000 006D 0001 0000 0010 0020", repeat=False, fallback=True)
send_lego_power_functions(sender, 0x1234, repeat=True)
```

Only oscillated (learned) Pronto codes, those whose first word is `0000`, are
accepted. `send_pronto` sends either the "once" part or the "repeat" part of
the code. With `fallback=True` it sends the other part when the requested
one is empty. A malformed or unsupported code raises `ProntoError`, a
subclass of `ValueError`.

`LegoPfBitStreamEncoder` can also be stepped through by hand with
`mark_duration()`, `pause_duration()` and `next()`. A repeated message is sent
five times, with gaps that depend on the channel.

## Decoding captured timings

A capture is a sequence of durations in 50 µs ticks. The first entry is the
gap before the transmission, and marks and spaces alternate after it.

```python
from homeswitch.receiver import decode

result = decode(rawbuf)
if result is not None:
    print(result.decode_type.name, hex(result.value), result.bits, result.address)
```

`decode` tries each protocol decoder in turn. If none of them matches, it
falls back to `decode_hash`, a 32-bit hash of the timing pattern reported
as `DecodeType.UNKNOWN`. It returns `None` only when the capture has fewer
than six entries and no protocol matches. A recognised repeat code has
the value `REPEAT` (`0xFFFFFFFF`, in `homeswitch.irtiming`) and 0 bits.

The decoders can also be called one at a time. Each returns a
`DecodeResults` or `None`:

- `homeswitch.irdecode`: `decode_nec`, `decode_samsung`, `decode_jvc`,
  `decode_lg`, `decode_whynter`, `decode_denon`, `decode_panasonic`,
  `decode_aiwa_rc_t501`
- `homeswitch.rcdecode`: `decode_rc5`, `decode_rc6`, `decode_sony`,
  `decode_sanyo`, `decode_mitsubishi`

`homeswitch.irtiming` holds the tolerance helpers the decoders use
(`ticks_low`, `ticks_high`, `match`, `match_mark`, `match_space`). It also
holds the `DecodeType` and `DecodeResults` types.

### Capturing from samples

Feed detector samples into an `IRReceiver`, one sample per 50 µs tick. A
sample is a level: `0` for a mark, `1` for a space.

```python
from homeswitch.receiver import IRReceiver

receiver = IRReceiver()
for level in samples:
    receiver.feed(level)
result = receiver.decode()
if result is not None:
    print(result.decode_type.name, hex(result.value))
receiver.resume()
```

`decode()` returns `None` while no complete code is waiting. If a waiting
code cannot be decoded, it discards the code and capture starts again.
`is_idle()` tells you whether a transmission is being recorded. The state
machine underneath is `homeswitch.irtiming.CaptureMachine`.

## Switches discoverable by voice assistants

Each `homeswitch.wemo.WemoSwitch` serves its own HTTP port. It answers these
paths:

- `/`
- `/setup.xml`, the device description
- `/eventservice.xml`
- `/upnp/control/basicevent1`, which takes `SetBinaryState` and
  `GetBinaryState` requests

When asked to turn on or off, it calls your callback, and the callback
returns the new state. A `homeswitch.upnp.UpnpBroadcastResponder` listens on
the SSDP multicast group, 239.255.255.250:1900. When an M-SEARCH for Belkin
devices, `ssdp:all` or `upnp:rootdevice` arrives, it has every switch added
to it reply. At most 14 switches can be added.

```python
from homeswitch.wemo import WemoSwitch
from homeswitch.upnp import UpnpBroadcastResponder

def lamp_on():
    return True

def lamp_off():
    return False

lamp = WemoSwitch("lamp", 8081, lamp_on, lamp_off, chip_id=0x123456, local_ip="192.168.1.20")
lamp.start()

with UpnpBroadcastResponder() as responder:
    responder.add_device(lamp)
    responder.begin_udp_multicast("192.168.1.20")
    try:
        while True:
            responder.server_loop()
    finally:
        lamp.stop()
```

`start()` serves HTTP in a background thread and returns the bound port;
`stop()` shuts the server down. The XML documents and the SSDP reply are
also available without a network, from `setup_xml()`, `eventservice_xml()`,
`relay_state_body()`, `handle_control(request)` and `search_response()`.
`server_loop()` handles at most one waiting datagram and does not block, so
the loop above polls the socket. `handle_packet(data, sender)` answers a
datagram you received yourself.

## What the package does not do

- It drives no hardware. `IRSender` only records pulse trains, and
  `IRReceiver` only processes samples you feed it. Transmitting pulses
  through an LED, or sampling a detector every 50 µs, is up to the caller.
- There are no Sanyo or Mitsubishi senders. There is no DISH, Sharp or LEGO
  Power Functions decoder.
- It provides no command-line program. The switches and the discovery
  responder run only when your own code runs them.
- Switch state is held in memory only and is not stored anywhere.