import socket
import struct

import pytest

from ckpoolkit.net import (
    SocketError,
    bind_socket,
    connect_socket,
    empty_socket,
    extract_sockaddr,
    keep_sockalive,
    nolinger_socket,
    read_length,
    url_from_serverurl,
    url_from_sockaddr,
    url_from_socket,
    wait_close,
    wait_read_select,
    wait_write_select,
    write_length,
    write_socket,
)


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


@pytest.mark.parametrize(
    "url, expected",
    [
        ("stratum+tcp://pool.example.com:3333", ("pool.example.com", "3333")),
        ("http://[::1]:8332", ("::1", "8332")),
        ("[::1]", ("::1", "80")),
        ("127.0.0.1", ("127.0.0.1", "80")),
        ("node.example.com:8332/path", ("node.example.com", "8332")),
        ("node.example.com:123456", ("node.example.com", "12345")),
    ],
)
def test_extract_sockaddr(url, expected):
    assert extract_sockaddr(url) == expected


@pytest.mark.parametrize("url", ["", "host:", "http://:3333"])
def test_extract_sockaddr_rejects(url):
    with pytest.raises(ValueError):
        extract_sockaddr(url)


def test_url_from_sockaddr_ipv4_and_ipv6():
    assert url_from_sockaddr(("127.0.0.1", 8080)) == ("127.0.0.1", "8080")
    assert url_from_sockaddr(("::1", 8332, 0, 0)) == ("::1", "8332")


def test_url_from_sockaddr_rejects_unix_path():
    with pytest.raises(ValueError):
        url_from_sockaddr("/tmp/socket")


def test_url_from_serverurl_numeric():
    assert url_from_serverurl("stratum+tcp://127.0.0.1:3333") == ("127.0.0.1", "3333")


def test_bind_and_connect_round_trip():
    with bind_socket("127.0.0.1", "0") as server:
        server.listen(1)
        host, port = url_from_socket(server)
        assert host == "127.0.0.1"
        assert int(port) > 0
        with connect_socket("127.0.0.1", port) as client:
            peer, _ = server.accept()
            with peer:
                assert client.getblocking()
                assert write_length(client, b"hello") == 5
                assert read_length(peer, 5) == b"hello"
                assert url_from_socket(client)[0] == "127.0.0.1"


def test_connect_refused_raises():
    with bind_socket("127.0.0.1", "0") as sock:
        port = url_from_socket(sock)[1]
    with pytest.raises(SocketError):
        connect_socket("127.0.0.1", port)


def test_keep_sockalive_and_nolinger():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        keep_sockalive(sock)
        assert sock.getsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE) != 0
        assert sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY) != 0
        nolinger_socket(sock)
        raw = sock.getsockopt(socket.SOL_SOCKET, socket.SO_LINGER, 8)
        assert struct.unpack("ii", raw) == (1, 0)


def test_read_write_length(pair):
    a, b = pair
    assert write_length(a, b"abcdef") == 6
    assert read_length(b, 4) == b"abcd"
    assert read_length(b, 2) == b"ef"


def test_read_length_rejects_bad_length(pair):
    with pytest.raises(ValueError):
        read_length(pair[1], 0)


def test_write_length_rejects_empty(pair):
    with pytest.raises(ValueError):
        write_length(pair[0], b"")


def test_read_length_after_close(pair):
    a, b = pair
    write_length(a, b"ab")
    a.close()
    with pytest.raises(SocketError):
        read_length(b, 4)


def test_write_socket(pair):
    a, b = pair
    assert write_socket(a, b"data") == 4
    assert read_length(b, 4) == b"data"


def test_wait_read_select(pair):
    a, b = pair
    assert wait_read_select(b, 0.05) is False
    a.sendall(b"x")
    assert wait_read_select(b, 1) is True


def test_wait_write_select(pair):
    assert wait_write_select(pair[0], 1) is True


def test_wait_close(pair):
    a, b = pair
    assert wait_close(b, 0) is False
    a.close()
    assert wait_close(b, 1) is True


def test_empty_socket(pair):
    a, b = pair
    a.sendall(b"abc")
    assert wait_read_select(b, 1)
    assert empty_socket(b) == 3
    assert wait_read_select(b, 0.05) is False
    assert empty_socket(b) == 0


def test_closed_socket_rejected(pair):
    a, _ = pair
    a.close()
    with pytest.raises(SocketError):
        wait_read_select(a, 0)