"""Infrared pulse encoding and decoding, Pronto and LEGO Power Functions codes, and WeMo-style switches answering UPnP discovery."""

__version__ = "0.1.0"

__all__ = [
    "irtiming",
    "irsend",
    "pronto",
    "lego_pf",
    "irdecode",
    "rcdecode",
    "receiver",
    "wemo",
    "upnp",
]