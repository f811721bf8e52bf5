from __future__ import annotations

import asyncio
import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional

from .config import Host, Settings
from .wol import MagicPacket, TransmissionError

logger = logging.getLogger("lanwake")


def setup_logging(log_file: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    """Attach console and optional rotating-file handlers to the "lanwake" logger.

    Handlers from an earlier call are replaced, handlers installed by anyone
    else are left alone. An unwritable log file leaves console logging only.
    """
    for old in [h for h in logger.handlers if getattr(h, "_lanwake", False)]:
        logger.removeHandler(old)
        old.close()
    logger.setLevel(level)

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    file_error: Optional[OSError] = None
    if log_file is not None:
        try:
            handlers.append(logging.handlers.RotatingFileHandler(str(log_file), maxBytes=1_000_000, backupCount=3))
        except OSError as e:
            file_error = e
    for h in handlers:
        h.setFormatter(fmt)
        h._lanwake = True
        logger.addHandler(h)
    if file_error is not None:
        logger.warning("Cannot write log file %s: %s", log_file, file_error)
    return logger


async def wake_host(host: Host) -> None:
    packet = MagicPacket(host.mac)
    try:
        await asyncio.to_thread(packet.send_to, host.destination, host.source)
    except TransmissionError as e:
        logger.exception("WoL failed for %s: %s", host.name, e)
        raise
    logger.info("Sent WoL to %s (%s) via %s:%d", host.name, host.mac, host.broadcast_ip, host.port)


async def wake_by_name(settings: Settings, name: str) -> Host:
    host = settings.find(name)
    if host is None:
        raise KeyError(f"Unknown host: {name}")
    await wake_host(host)
    return host
