"""Answer SSDP searches on behalf of a set of emulated WeMo switches."""

from __future__ import annotations

import logging
import socket
from types import TracebackType

from homeswitch.wemo import WemoSwitch

log = logging.getLogger(__name__)

SSDP_MULTICAST_ADDR = "239.255.255.250"
SSDP_PORT = 1900
MAX_SWITCHES = 14
UDP_TX_PACKET_MAX_SIZE = 8192

_SEARCH_TARGETS = ("urn:Belkin:device:**", "ssdp:all", "upnp:rootdevice")


def is_search_request(request: str) -> bool:
    """Whether ``request`` is an M-SEARCH that WeMo devices should answer."""
    if "M-SEARCH" not in request:
        return False
    return any(request.find(target) > 0 for target in _SEARCH_TARGETS)


class UpnpBroadcastResponder:
    """Listens on the SSDP multicast group and lets every switch reply."""

    def __init__(self) -> None:
        self.devices: list[WemoSwitch] = []
        self.port = SSDP_PORT
        self._sock: socket.socket | None = None

    def __enter__(self) -> UpnpBroadcastResponder:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def add_device(self, device: WemoSwitch) -> None:
        """Register a switch to answer searches."""
        if len(self.devices) >= MAX_SWITCHES:
            raise ValueError(f"at most {MAX_SWITCHES} switches can be added")
        log.info("adding switch %s, index %d", device.name, len(self.devices))
        self.devices.append(device)

    def begin_udp_multicast(self, local_ip: str) -> None:
        """Join the SSDP multicast group on the interface with ``local_ip``."""
        log.info("begin multicast")
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(("", self.port))
            membership = socket.inet_aton(SSDP_MULTICAST_ADDR) + socket.inet_aton(local_ip)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
            sock.setblocking(False)
        except OSError:
            sock.close()
            log.error("multicast connection failed")
            raise
        self.close()
        self._sock = sock
        log.info("UDP multicast server started at %s:%s", SSDP_MULTICAST_ADDR, self.port)

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise RuntimeError("multicast listening has not begun")
        return self._sock

    def handle_packet(self, data: bytes, sender: tuple[str, int]) -> int:
        """Answer one received datagram; returns how many switches replied."""
        sock = self._socket()
        request = data.split(b"\0", 1)[0].decode("latin-1")
        if not is_search_request(request):
            return 0
        log.info("got UDP Belkin request from %s:%s", *sender)
        for device in self.devices:
            device.respond_to_search(sock, sender)
        return len(self.devices)

    def server_loop(self) -> int:
        """Handle at most one waiting datagram; returns how many switches replied."""
        sock = self._socket()
        try:
            data, sender = sock.recvfrom(UDP_TX_PACKET_MAX_SIZE)
        except (BlockingIOError, InterruptedError):
            return 0
        if not data:
            return 0
        return self.handle_packet(data, sender)

    def close(self) -> None:
        """Leave the multicast group and close the socket."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None