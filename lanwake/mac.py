from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

MAC_LENGTH = 6

_HEX_OCTET = re.compile(r"[0-9a-fA-F]{1,2}")


class ParseError(ValueError):
    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Unable to parse MAC address {text!r}: {reason}")
        self.text = text
        self.reason = reason


@dataclass(frozen=True)
class HardwareAddress:
    octets: bytes

    def __post_init__(self) -> None:
        # bytes(n) would silently build n zero bytes
        if isinstance(self.octets, int):
            raise TypeError(f"MAC address must be bytes-like, got int {self.octets!r}")
        octets = bytes(self.octets)
        if len(octets) != MAC_LENGTH:
            raise ValueError(f"MAC address must be {MAC_LENGTH} bytes, got {len(octets)}")
        object.__setattr__(self, "octets", octets)

    def __bytes__(self) -> bytes:
        return self.octets

    def __str__(self) -> str:
        return ":".join(f"{b:02X}" for b in self.octets)


MacLike = Union[HardwareAddress, bytes, bytearray, memoryview]


def parse_mac(text: str) -> HardwareAddress:
    """Parse ``AA:BB:CC:DD:EE:FF`` (any case) into a HardwareAddress.

    Every token must be one or two hex digits; a single bad token rejects
    the whole string.
    """
    tokens = text.strip().split(":")
    if len(tokens) != MAC_LENGTH:
        raise ParseError(text, f"expected {MAC_LENGTH} fields, got {len(tokens)}")

    octets = bytearray()
    for token in tokens:
        if not _HEX_OCTET.fullmatch(token):
            raise ParseError(text, f"invalid hex byte {token!r}")
        octets.append(int(token, 16))
    return HardwareAddress(bytes(octets))


def as_hardware_address(mac: Union[MacLike, str]) -> HardwareAddress:
    if isinstance(mac, HardwareAddress):
        return mac
    if isinstance(mac, str):
        return parse_mac(mac)
    return HardwareAddress(bytes(mac))
