from __future__ import annotations

import asyncio
import logging
import logging.handlers
import socket
from pathlib import Path

import pytest

from lanwake.config import Host, Settings
from lanwake.mac import parse_mac
from lanwake.wake import logger, setup_logging, wake_by_name, wake_host
from lanwake.wol import TransmissionError, build_magic_packet


@pytest.fixture
def receiver():
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    s.bind(("127.0.0.1", 0))
    s.settimeout(2.0)
    yield s
    s.close()


@pytest.fixture
def reset_logger():
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for h in logger.handlers:
        if h not in handlers:
            h.close()
    logger.handlers = handlers
    logger.setLevel(level)


def loopback_host(name: str, port: int) -> Host:
    return Host(name=name, mac=parse_mac("aa:bb:cc:dd:ee:ff"), broadcast_ip="127.0.0.1", port=port, source_ip="127.0.0.1")


def test_wake_host(receiver, caplog):
    host = loopback_host("pc1", receiver.getsockname()[1])
    with caplog.at_level(logging.INFO, logger="lanwake"):
        asyncio.run(wake_host(host))
    data, _ = receiver.recvfrom(1024)
    assert data == build_magic_packet(host.mac)
    assert "Sent WoL to pc1" in caplog.text


def test_wake_host_failure_is_raised(receiver, caplog):
    port = receiver.getsockname()[1]
    # source port is already held by the receiver
    host = Host(
        name="pc1",
        mac=parse_mac("aa:bb:cc:dd:ee:ff"),
        broadcast_ip="127.0.0.1",
        port=port,
        source_ip="127.0.0.1",
        source_port=port,
    )
    with pytest.raises(TransmissionError):
        asyncio.run(wake_host(host))
    assert "WoL failed for pc1" in caplog.text


def test_wake_by_name(receiver):
    host = loopback_host("nas", receiver.getsockname()[1])
    settings = Settings(log_file=Path("unused.log"), hosts=[host])
    assert asyncio.run(wake_by_name(settings, "nas")) is host
    data, _ = receiver.recvfrom(1024)
    assert len(data) == 102


def test_wake_by_name_unknown():
    settings = Settings(log_file=Path("unused.log"), hosts=[])
    with pytest.raises(KeyError):
        asyncio.run(wake_by_name(settings, "ghost"))


def test_setup_logging(tmp_path: Path, reset_logger):
    logger.handlers = []
    log_file = tmp_path / "lanwake.log"
    assert setup_logging(log_file) is logger
    setup_logging(log_file)
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2
    logger.info("hello")
    for h in logger.handlers:
        h.flush()
    assert "INFO lanwake: hello" in log_file.read_text(encoding="utf-8")


def test_setup_logging_switches_file(tmp_path: Path, reset_logger):
    other = logging.NullHandler()
    logger.handlers = [other]
    setup_logging(tmp_path / "first.log")
    setup_logging(tmp_path / "second.log", level=logging.DEBUG)
    assert logger.level == logging.DEBUG
    assert other in logger.handlers
    files = [h.baseFilename for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert files == [str(tmp_path / "second.log")]


def test_setup_logging_unwritable(tmp_path: Path, reset_logger):
    logger.handlers = []
    setup_logging(tmp_path / "missing-dir" / "lanwake.log")
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
