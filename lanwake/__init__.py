"""Build and send Wake-on-LAN magic packets."""

from .mac import HardwareAddress, ParseError, parse_mac
from .wol import (
    ANY_ENDPOINT,
    BROADCAST_ENDPOINT,
    BROADCAST_IP,
    DEFAULT_PORT,
    MAGIC_PACKET_SIZE,
    MagicPacket,
    SocketEndpoint,
    TransmissionError,
    build_magic_packet,
    send_magic_packet,
)

__all__ = [
    "ANY_ENDPOINT",
    "BROADCAST_ENDPOINT",
    "BROADCAST_IP",
    "DEFAULT_PORT",
    "MAGIC_PACKET_SIZE",
    "HardwareAddress",
    "MagicPacket",
    "ParseError",
    "SocketEndpoint",
    "TransmissionError",
    "build_magic_packet",
    "parse_mac",
    "send_magic_packet",
]
