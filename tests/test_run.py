"""Port fallback used by run.py when the configured port is busy."""
import socket

import pytest

from run import find_available_port


def test_returns_start_port_when_free():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        free_port = probe.getsockname()[1]
    assert find_available_port("127.0.0.1", free_port, 0) == free_port


def test_skips_busy_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]
        chosen = find_available_port("127.0.0.1", port, 5)
        assert chosen != port
        assert port < chosen <= port + 5


def test_gives_up_after_max_attempts():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]
        with pytest.raises(RuntimeError):
            find_available_port("127.0.0.1", port, 0)
