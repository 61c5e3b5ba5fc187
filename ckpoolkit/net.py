"""TCP socket helpers: URL parsing, resolving, connecting and length-exact I/O."""

from __future__ import annotations

import errno
import logging
import select
import socket
import struct
import time

log = logging.getLogger(__name__)

PAGESIZE = 4096

_POLLRDHUP = getattr(select, "POLLRDHUP", 0x2000)


class SocketError(OSError):
    """A socket operation could not be completed."""


def extract_sockaddr(url: str) -> tuple[str, str]:
    """Split a server URL into its host and port.

    Any scheme before "//" is skipped, numeric IPv6 hosts may be given in
    brackets, the port is cut to five characters and at a '/', and defaults
    to "80". Raises ValueError when no host or an empty port is given.
    """
    if url is None:
        raise ValueError("no url given")
    start = url.find("//")
    rest = url if start < 0 else url[start + 2:]

    ipv6_begin = rest.find("[")
    ipv6_end = rest.find("]")
    bracketed = ipv6_begin >= 0 and ipv6_end >= 0 and ipv6_end > ipv6_begin
    colon = rest.find(":", ipv6_end) if bracketed else rest.find(":")

    port = ""
    if colon >= 0:
        host_len = colon
        port = rest[colon + 1:]
        if not port:
            raise ValueError(f"empty port in url {url!r}")
    else:
        host_len = len(rest)

    begin = 0
    if bracketed:
        host_len -= 2
        begin = 1
    if host_len < 1:
        raise ValueError(f"no host in url {url!r}")
    host = rest[begin:begin + host_len]

    if port:
        port = port[:5].split("/", 1)[0]
    else:
        port = "80"
    return host, port


def url_from_sockaddr(addr) -> tuple[str, str]:
    """Return the host and port string of an IPv4 or IPv6 socket address."""
    if (
        not isinstance(addr, tuple)
        or len(addr) < 2
        or not isinstance(addr[0], str)
        or not isinstance(addr[1], int)
    ):
        raise ValueError(f"not an internet socket address: {addr!r}")
    return addr[0], str(addr[1])


def _getaddrinfo(host: str, port: str) -> list:
    """Resolve host and port for a stream socket, retrying on EAI_AGAIN."""
    while True:
        try:
            return socket.getaddrinfo(host, port, socket.AF_UNSPEC, socket.SOCK_STREAM)
        except socket.gaierror as exc:
            if exc.errno == socket.EAI_AGAIN:
                continue
            raise SocketError(f"failed to resolve {host}:{port}: {exc}") from exc


def url_from_serverurl(serverurl: str) -> tuple[str, str]:
    """Resolve a server URL to a numeric host and port."""
    host, port = extract_sockaddr(serverurl)
    infos = _getaddrinfo(host, port)
    if not infos:
        raise SocketError(f"no address found for {host}:{port}")
    return url_from_sockaddr(infos[0][4])


def _fileno(sock: socket.socket) -> int:
    fd = sock.fileno()
    if fd < 0:
        raise SocketError("socket is closed")
    return fd


def url_from_socket(sock: socket.socket) -> tuple[str, str]:
    """Return the local host and port a socket is bound to."""
    _fileno(sock)
    return url_from_sockaddr(sock.getsockname())


def keep_sockalive(sock: socket.socket) -> None:
    """Enable keepalive probing and disable Nagle's algorithm on a TCP socket."""
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    for name, value in (("TCP_KEEPCNT", 1), ("TCP_KEEPIDLE", 45), ("TCP_KEEPINTVL", 30)):
        option = getattr(socket, name, None)
        if option is not None:
            sock.setsockopt(socket.IPPROTO_TCP, option, value)


def nolinger_socket(sock: socket.socket) -> None:
    """Make close discard unsent data and reset the connection."""
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 1, 0))


def bind_socket(url: str, port: str) -> socket.socket:
    """Return a stream socket bound to url:port with SO_REUSEADDR set."""
    infos = _getaddrinfo(url, port)
    for family, socktype, proto, _, addr in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError:
            continue
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(addr)
        except OSError as exc:
            sock.close()
            raise SocketError(f"failed to bind socket for {url}:{port}: {exc}") from exc
        return sock
    raise SocketError(f"failed to open socket for {url}:{port}")


def connect_socket(url: str, port: str) -> socket.socket:
    """Connect to the first address of url:port that answers within 5 seconds."""
    for family, socktype, proto, _, addr in _getaddrinfo(url, port):
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError:
            log.debug("Failed socket")
            continue
        sock.setblocking(False)
        err = sock.connect_ex(addr)
        if err == 0:
            log.debug("Succeeded immediate connect")
            sock.setblocking(True)
            return sock
        if err != errno.EINPROGRESS:
            sock.close()
            log.debug("Failed sock connect")
            continue
        if wait_write_select(sock, 5):
            if not sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR):
                log.debug("Succeeded delayed connect")
                sock.setblocking(True)
                return sock
        sock.close()
        log.debug("Select timeout/failed connect")
    log.info("Failed to connect to %s:%s", url, port)
    raise SocketError(f"failed to connect to {url}:{port}")


def round_trip(url: str) -> int:
    """Return the minimum milliseconds for a refused connect to url, or 0.

    Five connects are made to port 1042, which should be closed; the fastest
    refusal is the result. Any other outcome ends the measurement early.
    """
    port = "1042"
    try:
        infos = _getaddrinfo(url, port)
    except SocketError:
        log.warning("Failed to resolve (?wrong URL) %s:%s", url, port)
        return 0
    if not infos:
        return 0
    family, socktype, proto, _, addr = infos[0]
    best = 0
    for _ in range(5):
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError:
            log.error("Failed socket")
            return best
        with sock:
            start = time.monotonic()
            err = sock.connect_ex(addr)
            elapsed = int((time.monotonic() - start) * 1000)
        if err != errno.ECONNREFUSED:
            log.info("Unable to get round trip due to %s:%s connect not being refused",
                     url, port)
            return best
        if not best or elapsed < best:
            best = elapsed
    if best > 500:
        log.info("Round trip to %s:%s greater than 500ms at %d", url, port, best)
    log.info("Minimum round trip to %s:%s calculated as %dms", url, port, best)
    return best


def _poll(sock: socket.socket, events: int, timeout: float | None) -> int:
    poller = select.poll()
    poller.register(_fileno(sock), events)
    ms = None if timeout is None or timeout < 0 else int(timeout * 1000)
    ready = poller.poll(ms)
    return ready[0][1] if ready else 0


def wait_close(sock: socket.socket, timeout: int) -> bool:
    """Return whether the peer closes the connection within timeout seconds."""
    revents = _poll(sock, _POLLRDHUP, timeout)
    return bool(revents & (select.POLLHUP | _POLLRDHUP | select.POLLERR))


def wait_read_select(sock: socket.socket, timeout: float) -> bool:
    """Return whether sock becomes readable (or hung up) within timeout seconds."""
    return bool(_poll(sock, select.POLLIN | _POLLRDHUP, timeout))


def wait_write_select(sock: socket.socket, timeout: float) -> bool:
    """Return whether sock becomes writable within timeout seconds."""
    return bool(_poll(sock, select.POLLOUT | _POLLRDHUP, timeout))


def read_length(sock: socket.socket, length: int) -> bytes:
    """Read exactly length bytes from sock."""
    if length < 1:
        raise ValueError(f"invalid read length of {length}")
    _fileno(sock)
    chunks = []
    remaining = length
    while remaining:
        try:
            chunk = sock.recv(remaining, socket.MSG_WAITALL)
        except OSError as exc:
            raise SocketError(f"failed to read {length} bytes: {exc}") from exc
        if not chunk:
            raise SocketError(f"connection closed after {length - remaining} of {length} bytes")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def write_length(sock: socket.socket, data: bytes) -> int:
    """Write all of data to sock and return the number of bytes written."""
    data = bytes(data)
    if not data:
        raise ValueError("invalid write length of 0")
    _fileno(sock)
    view = memoryview(data)
    written = 0
    while written < len(data):
        try:
            written += sock.send(view[written:])
        except OSError as exc:
            log.error("Failed to write %d bytes in write_length (%s)",
                      len(data) - written, exc)
            raise SocketError(f"failed to write {len(data) - written} bytes: {exc}") from exc
    return written


def write_socket(sock: socket.socket, data: bytes) -> int:
    """Write all of data once sock is writable, waiting up to 5 seconds."""
    if not wait_write_select(sock, 5):
        log.info("Select timed out in write_socket")
        raise SocketError("timed out waiting to write")
    return write_length(sock, data)


def empty_socket(sock: socket.socket) -> int:
    """Discard whatever is waiting to be read on sock; return the bytes dropped."""
    if sock.fileno() < 1:
        return 0
    total = 0
    while True:
        try:
            chunk = sock.recv(PAGESIZE - 1, socket.MSG_DONTWAIT)
        except (BlockingIOError, InterruptedError):
            break
        except OSError:
            break
        if not chunk:
            break
        log.debug("Discarding: %r", chunk)
        total += len(chunk)
    return total