import socket

import pytest


@pytest.fixture
def silent_upstream():
    """Base URL of a TCP listener that accepts connections but never answers.

    Connections complete in the listen backlog; nothing ever reads or writes,
    so the client waits until its own read timeout fires.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(16)
    host, port = sock.getsockname()
    try:
        yield f"http://{host}:{port}/v1"
    finally:
        sock.close()
