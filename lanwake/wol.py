from __future__ import annotations

import asyncio
import errno
import logging
import socket
from dataclasses import dataclass, field
from typing import NamedTuple, Tuple, Union

from .mac import HardwareAddress, MacLike, as_hardware_address, parse_mac

logger = logging.getLogger("lanwake")

BROADCAST_IP = "255.255.255.255"
DEFAULT_PORT = 9

MAGIC_HEADER = b"\xff" * 6
MAC_REPEAT = 16
MAGIC_PACKET_SIZE = len(MAGIC_HEADER) + 6 * MAC_REPEAT


class SocketEndpoint(NamedTuple):
    host: str
    port: int


ANY_ENDPOINT = SocketEndpoint("0.0.0.0", 0)
BROADCAST_ENDPOINT = SocketEndpoint(BROADCAST_IP, DEFAULT_PORT)

Endpoint = Union[SocketEndpoint, Tuple[str, int]]


class TransmissionError(OSError):
    pass


def build_magic_packet(mac: MacLike) -> bytes:
    """Return the 102-byte payload: 6 x 0xFF followed by the MAC 16 times."""
    mac_bytes = bytes(as_hardware_address(mac))
    return MAGIC_HEADER + mac_bytes * MAC_REPEAT


def _resolve(endpoint: Endpoint, family: int = socket.AF_UNSPEC) -> Tuple[int, tuple]:
    host, port = endpoint
    if not 0 <= port <= 65535:
        raise TransmissionError(errno.EINVAL, f"Port out of range: {port}")
    # socket.bind / sendto shorthands that getaddrinfo does not understand
    if host == "":
        host = "::" if family == socket.AF_INET6 else "0.0.0.0"
    elif host == "<broadcast>":
        host = BROADCAST_IP
    infos = socket.getaddrinfo(host, port, family, socket.SOCK_DGRAM)
    af, _, _, _, sockaddr = infos[0]
    return af, sockaddr


@dataclass(frozen=True, init=False)
class MagicPacket:
    """A Wake-on-LAN magic packet for one hardware address.

    Building it does not send anything. Use :meth:`send` for the usual
    ``0.0.0.0:0 -> 255.255.255.255:9`` broadcast, :meth:`send_to` to pick the
    endpoints, or :attr:`magic_bytes` to write the payload on a socket you
    manage yourself (e.g. when waking many hosts).
    """

    mac: HardwareAddress
    magic_bytes: bytes = field(init=False, repr=False, compare=False)

    def __init__(self, mac: MacLike) -> None:
        address = as_hardware_address(mac)
        object.__setattr__(self, "mac", address)
        object.__setattr__(self, "magic_bytes", build_magic_packet(address))

    @classmethod
    def from_string(cls, text: str) -> "MagicPacket":
        return cls(parse_mac(text))

    def send(self) -> None:
        self.send_to(BROADCAST_ENDPOINT, ANY_ENDPOINT)

    def send_to(self, destination: Endpoint, source: Endpoint) -> None:
        """Bind a UDP socket to ``source`` and send the payload to ``destination``.

        Raises TransmissionError if resolving, binding, enabling broadcast or
        sending fails. The socket is closed on every path.
        """
        try:
            family, bind_addr = _resolve(source)
            _, dest_addr = _resolve(destination, family)
            with socket.socket(family, socket.SOCK_DGRAM) as s:
                s.bind(bind_addr)
                s.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
                logger.debug("Sending magic packet for %s from %s to %s", self.mac, s.getsockname(), dest_addr)
                s.sendto(self.magic_bytes, dest_addr)
        except TransmissionError:
            raise
        except OSError as e:
            raise TransmissionError(*e.args) from e


async def send_magic_packet(
    mac: Union[MacLike, str],
    broadcast_ip: str = BROADCAST_IP,
    port: int = DEFAULT_PORT,
) -> None:
    packet = MagicPacket(as_hardware_address(mac))

    # Offload blocking I/O to thread to avoid blocking asyncio loop
    await asyncio.to_thread(packet.send_to, SocketEndpoint(broadcast_ip, port), ANY_ENDPOINT)
