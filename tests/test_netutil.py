import socket

import pytest

from amqpwire.netutil import Poll, resolve


@pytest.fixture
def pair():
    first, second = socket.socketpair()
    yield first, second
    first.close()
    second.close()


def test_not_readable_without_data(pair):
    _, second = pair
    assert Poll(second).readable(False) is False


def test_readable_after_data(pair):
    first, second = pair
    first.sendall(b"x")
    assert Poll(second.fileno()).readable(True) is True
    assert Poll(second).readable(False) is True


def test_writable(pair):
    first, _ = pair
    assert Poll(first).writable(False) is True
    assert Poll(first).writable(True) is True


def test_active(pair):
    first, _ = pair
    assert Poll(first).active(False) is True


def test_negative_descriptor_rejected():
    with pytest.raises(ValueError):
        Poll(-1)


def test_resolve_loopback():
    results = resolve("127.0.0.1", 5672)
    assert results
    assert all(entry[1] == socket.SOCK_STREAM for entry in results)
    assert ("127.0.0.1", 5672) in [entry[4][:2] for entry in results]


def test_resolve_default_port():
    results = resolve("127.0.0.1")
    assert {entry[4][1] for entry in results} == {5672}


def test_resolve_rejects_bad_port():
    with pytest.raises(ValueError):
        resolve("127.0.0.1", 70000)


def test_resolve_unknown_host():
    with pytest.raises(socket.gaierror):
        resolve("host.invalid", 5672)