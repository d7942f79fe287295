"""A switch that presents itself to voice assistants as a Belkin WeMo socket.

Each :class:`WemoSwitch` serves the WeMo device description and control
endpoints over HTTP. It answers SSDP searches with the location of its
description and turns itself on or off through user supplied callbacks.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qsl, urlsplit
from xml.sax.saxutils import escape

log = logging.getLogger(__name__)

SwitchCallback = Callable[[], bool]

SERIAL_PREFIX = "38323636-4558-4dda-9188-cda0e6"
SERIAL_NUMBER = "000000A0000001"

ROOT_TEXT = "You should tell Alexa to discover devices"

CRLF = "\r\n"
BELKIN_DEVICE_URN = "urn:Belkin:device:**"
BASICEVENT_SERVICE = "urn:Belkin:service:basicevent:1"
SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_ENCODING_NS = "http://schemas.xmlsoap.org/soap/encoding/"

CONTROL_PATH = "/upnp/control/basicevent1"
EVENT_PATH = "/upnp/event/basicevent1"
EVENTSERVICE_PATH = "/eventservice.xml"
SETUP_PATH = "/setup.xml"


def _tag(name: str, *content: str, attrs: str = "") -> str:
    return f"<{name}{attrs}>{''.join(content)}</{name}>"


def _binary_state_action(action: str, direction: str) -> str:
    argument = _tag(
        "argument",
        "<retval/>",
        _tag("name", "BinaryState"),
        _tag("relatedStateVariable", "BinaryState"),
        _tag("direction", direction),
    )
    return _tag("action", _tag("name", action), _tag("argumentList", argument))


def _state_variable(name: str, data_type: str) -> str:
    return _tag(
        "stateVariable",
        _tag("name", name),
        _tag("dataType", data_type),
        _tag("defaultValue", "0"),
        attrs=' sendEvents="yes"',
    )


EVENTSERVICE_XML = (
    _tag(
        "scpd",
        _tag(
            "actionList",
            _binary_state_action("SetBinaryState", "in"),
            _binary_state_action("GetBinaryState", "out"),
        ),
        _tag(
            "serviceStateTable",
            _state_variable("BinaryState", "Boolean"),
            _state_variable("level", "string"),
        ),
        attrs=' xmlns="urn:Belkin:service-1-0"',
    )
    + CRLF * 2
)


def device_serial(chip_id: int) -> str:
    """The device serial built from the low three bytes of ``chip_id``."""
    low_bytes = (chip_id & 0xFFFFFF).to_bytes(3, "big")
    return SERIAL_PREFIX + low_bytes.hex()


class WemoSwitch:
    """One emulated WeMo socket served on its own HTTP port."""

    def __init__(
        self,
        name: str,
        port: int,
        on_callback: SwitchCallback,
        off_callback: SwitchCallback,
        chip_id: int,
        local_ip: str,
    ) -> None:
        self.name = name
        self.port = port
        self.on_callback = on_callback
        self.off_callback = off_callback
        self.local_ip = local_ip
        self.serial = device_serial(chip_id)
        self.persistent_uuid = f"Socket-1_0-{self.serial}-{port}"
        self.switch_status = False
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    def setup_xml(self) -> str:
        """The device description served at ``/setup.xml``."""
        service = _tag(
            "service",
            _tag("serviceType", BASICEVENT_SERVICE),
            _tag("serviceId", "urn:Belkin:serviceId:basicevent1"),
            _tag("controlURL", CONTROL_PATH),
            _tag("eventSubURL", EVENT_PATH),
            _tag("SCPDURL", EVENTSERVICE_PATH),
        )
        device = _tag(
            "device",
            _tag("deviceType", "urn:Belkin:device:controllee:1"),
            _tag("friendlyName", escape(self.name)),
            _tag("manufacturer", "Belkin International Inc."),
            _tag("modelName", "Socket"),
            _tag("modelNumber", "3.1415"),
            _tag("modelDescription", "Belkin Plugin Socket 1.0"),
            CRLF,
            _tag("UDN", f"uuid:{self.persistent_uuid}"),
            _tag("serialNumber", SERIAL_NUMBER),
            _tag("binaryState", "0"),
            _tag("serviceList", service),
        )
        return '<?xml version="1.0"?>' + _tag("root", device) + CRLF * 2

    def eventservice_xml(self) -> str:
        """The service description served at ``/eventservice.xml``."""
        return EVENTSERVICE_XML

    def relay_state_body(self) -> str:
        """The SOAP response reporting the current on/off state."""
        state = "1" if self.switch_status else "0"
        envelope_open = (
            f'<s:Envelope xmlns:s="{SOAP_ENVELOPE_NS}" '
            f's:encodingStyle="{SOAP_ENCODING_NS}">'
        )
        lines = [
            envelope_open + "<s:Body>",
            f'<u:GetBinaryStateResponse xmlns:u="{BASICEVENT_SERVICE}">',
            _tag("BinaryState", state),
            "</u:GetBinaryStateResponse>",
            "</s:Body> </s:Envelope>",
            "",
        ]
        return CRLF.join(lines)

    def handle_control(self, request: str) -> tuple[str, str]:
        """Act on a basicevent control request; returns content type and body."""
        log.debug("control request: %s", request)
        replies: list[str] = []
        if "SetBinaryState" in request:
            if _tag("BinaryState", "1") in request:
                log.info("%s: turn on request", self.name)
                self.switch_status = bool(self.on_callback())
                replies.append(self.relay_state_body())
            if _tag("BinaryState", "0") in request:
                log.info("%s: turn off request", self.name)
                self.switch_status = bool(self.off_callback())
                replies.append(self.relay_state_body())
        if "GetBinaryState" in request:
            log.info("%s: binary state request", self.name)
            replies.append(self.relay_state_body())
        if replies:
            return "text/xml", replies[0]
        return "text/plain", ""

    def search_response(self) -> str:
        """The SSDP reply announcing this switch's description location."""
        headers = [
            ("CACHE-CONTROL", "max-age=86400"),
            ("DATE", "Sat, 26 Nov 2016 04:56:29 GMT"),
            ("EXT", ""),
            ("LOCATION", f"http://{self.local_ip}:{self.port}{SETUP_PATH}"),
            ("OPT", '"http://schemas.upnp.org/upnp/1/0/"; ns=01'),
            ("01-NLS", "b9200ebb-736d-4b93-bf03-835149d13983"),
            ("SERVER", "Unspecified, UPnP/1.0, Unspecified"),
            ("ST", BELKIN_DEVICE_URN),
            ("USN", f"uuid:{self.persistent_uuid}::{BELKIN_DEVICE_URN}"),
            ("X-User-Agent", "redsonic"),
        ]
        lines = ["HTTP/1.1 200 OK"]
        lines.extend(f"{key}: {value}" if value else f"{key}:" for key, value in headers)
        return CRLF.join(lines) + CRLF * 2

    def respond_to_search(self, sock: Any, sender: tuple[str, int]) -> None:
        """Send the SSDP reply to ``sender`` through the datagram socket ``sock``."""
        log.info("%s: sending search response to %s:%s", self.name, *sender)
        sock.sendto(self.search_response().encode("utf-8"), sender)

    def _route(self, path: str, request: str) -> tuple[int, str, str]:
        if path == "/":
            return 200, "text/plain", ROOT_TEXT
        if path == SETUP_PATH:
            return 200, "text/xml", self.setup_xml()
        if path == CONTROL_PATH:
            content_type, body = self.handle_control(request)
            return 200, content_type, body
        if path == EVENTSERVICE_PATH:
            return 200, "text/plain", self.eventservice_xml()
        return 404, "text/plain", f"Not found: {path}"

    def start(self) -> int:
        """Start serving HTTP in a background thread; returns the bound port."""
        if self._server is not None:
            raise RuntimeError(f"switch {self.name!r} is already started")
        switch = self

        class _Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                self._dispatch()

            def do_POST(self) -> None:
                self._dispatch()

            def do_PUT(self) -> None:
                self._dispatch()

            def _dispatch(self) -> None:
                parts = urlsplit(self.path)
                args = [value for _, value in parse_qsl(parts.query, keep_blank_values=True)]
                length = int(self.headers.get("Content-Length") or 0)
                if length:
                    args.append(self.rfile.read(length).decode("utf-8", "replace"))
                status, content_type, body = switch._route(
                    parts.path, args[0] if args else ""
                )
                payload = body.encode("utf-8")
                self.send_response(status)
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)

            def log_message(self, format: str, *args: Any) -> None:
                log.debug("%s: " + format, switch.name, *args)

        server = ThreadingHTTPServer(("", self.port), _Handler)
        server.daemon_threads = True
        self._server = server
        self._thread = threading.Thread(target=server.serve_forever, daemon=True)
        self._thread.start()
        bound = server.server_address[1]
        log.info("%s: web server started on port %s", self.name, bound)
        return bound

    def stop(self) -> None:
        """Stop the HTTP server if it is running."""
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join()
        self._server = None
        self._thread = None