from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv

from .mac import HardwareAddress, ParseError, parse_mac
from .wol import BROADCAST_IP, DEFAULT_PORT, SocketEndpoint


@dataclass(frozen=True)
class Host:
    name: str
    mac: HardwareAddress
    broadcast_ip: str = BROADCAST_IP
    port: int = DEFAULT_PORT
    source_ip: str = "0.0.0.0"
    source_port: int = 0

    @property
    def destination(self) -> SocketEndpoint:
        return SocketEndpoint(self.broadcast_ip, self.port)

    @property
    def source(self) -> SocketEndpoint:
        return SocketEndpoint(self.source_ip, self.source_port)


@dataclass(frozen=True)
class Settings:
    log_file: Path
    hosts: List[Host]

    def find(self, name: str) -> Optional[Host]:
        return next((h for h in self.hosts if h.name == name), None)


class ConfigError(Exception):
    pass


def _parse_port(raw, where: str) -> int:
    try:
        port = int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{where}: port must be an integer, got {raw!r}") from e
    if not 0 <= port <= 65535:
        raise ConfigError(f"{where}: port out of range: {port}")
    return port


def load_settings(env_path: Optional[Path] = None, hosts_path: Optional[Path] = None) -> Settings:
    """Load settings from .env and hosts.yml.

    Env vars:
      - LOG_FILE: path to log file (optional; default ./lanwake.log)
      - WOL_BROADCAST_IP: broadcast address for hosts that do not set one
      - WOL_PORT: UDP port for hosts that do not set one (default 9)
      - WOL_HOSTS_FILE: hosts file used when hosts_path is not given
    """
    if env_path is None:
        env_path = Path(".env")

    if env_path.exists():
        load_dotenv(dotenv_path=env_path)

    if hosts_path is None:
        hosts_path = Path(os.getenv("WOL_HOSTS_FILE") or "hosts.yml")

    log_file = Path(os.getenv("LOG_FILE", "./lanwake.log"))
    default_broadcast = os.getenv("WOL_BROADCAST_IP", BROADCAST_IP).strip()
    default_port = _parse_port(os.getenv("WOL_PORT", str(DEFAULT_PORT)), "WOL_PORT")

    if not hosts_path.is_file():
        raise ConfigError(f"Hosts file not found: {hosts_path}")

    with hosts_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed hosts file {hosts_path}: {e}") from e

    if not isinstance(data, dict) or "hosts" not in data or not isinstance(data["hosts"], list):
        raise ConfigError("hosts.yml must contain a 'hosts' list")

    hosts: List[Host] = []
    seen = set()
    for index, item in enumerate(data["hosts"]):
        name = f"#{index}"
        try:
            name = str(item["name"]).strip()
            if name in seen:
                raise ConfigError(f"Duplicate host name: {name}")
            seen.add(name)
            mac = parse_mac(str(item["mac"]))
            broadcast_ip = str(item.get("broadcast_ip") or default_broadcast).strip()
            port = _parse_port(item.get("port", default_port), f"host {name}")
            source_ip = str(item.get("source_ip") or "0.0.0.0").strip()
            source_port = _parse_port(item.get("source_port", 0), f"host {name}")
            hosts.append(
                Host(
                    name=name,
                    mac=mac,
                    broadcast_ip=broadcast_ip,
                    port=port,
                    source_ip=source_ip,
                    source_port=source_port,
                )
            )
        except ParseError as e:
            raise ConfigError(f"Invalid MAC address for host {name}: {e.text}") from e
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid host configuration for {name}: {e}") from e

    return Settings(log_file=log_file, hosts=hosts)
