"""Process-wide dual-stack connection racing for urllib3.

urllib3 opens every connection through ``urllib3.util.connection.create_connection``,
which walks the resolved addresses one by one. When the first address is an
IPv6 one on a host with a broken IPv6 route, each request stalls until the
connect timeout. ``set_default_auto_select_family(True)`` swaps in a racing
``create_connection`` (RFC 8305 style: families interleaved, a new attempt
every ``CONNECTION_ATTEMPT_DELAY`` seconds, first socket to connect wins);
``False`` restores urllib3's sequential behaviour.
"""

from __future__ import annotations

import queue
import socket
import threading
from typing import Callable, Optional

import urllib3.util.connection as urllib3_connection

from tgnet.config.constants import CONNECTION_ATTEMPT_DELAY

_original_create_connection = urllib3_connection.create_connection

# urllib3 passes its own sentinel when no connect timeout is configured.
_DEFAULT_TIMEOUTS = (
    socket._GLOBAL_DEFAULT_TIMEOUT,
    getattr(urllib3_connection, "_DEFAULT_TIMEOUT", socket._GLOBAL_DEFAULT_TIMEOUT),
)


def open_socket(info, timeout, source_address=None, socket_options=None) -> socket.socket:
    """Connect a single ``getaddrinfo`` entry, closing the socket on failure."""
    af, socktype, proto, _canonname, sa = info
    sock = None
    try:
        sock = socket.socket(af, socktype, proto)
        for opt in socket_options or ():
            sock.setsockopt(*opt)
        if not any(timeout is default for default in _DEFAULT_TIMEOUTS):
            sock.settimeout(timeout)
        if source_address:
            sock.bind(source_address)
        sock.connect(sa)
        return sock
    except OSError:
        if sock is not None:
            sock.close()
        raise


def _interleave(infos):
    v6 = [info for info in infos if info[0] == socket.AF_INET6]
    v4 = [info for info in infos if info[0] != socket.AF_INET6]
    first, second = (v6, v4) if infos[0][0] == socket.AF_INET6 else (v4, v6)
    ordered = []
    for index in range(max(len(first), len(second))):
        if index < len(first):
            ordered.append(first[index])
        if index < len(second):
            ordered.append(second[index])
    return ordered


def _close_stragglers(results: "queue.Queue", pending: int) -> None:
    for _ in range(pending):
        sock, _err = results.get()
        if sock is not None:
            sock.close()


def create_connection(
    address,
    timeout=socket._GLOBAL_DEFAULT_TIMEOUT,
    source_address=None,
    socket_options=None,
) -> socket.socket:
    host, port = address
    if host.startswith("["):
        host = host.strip("[]")

    infos = socket.getaddrinfo(host, port, urllib3_connection.allowed_gai_family(), socket.SOCK_STREAM)
    if not infos:
        raise OSError("getaddrinfo returns an empty list")
    if len({info[0] for info in infos}) < 2:
        return _original_create_connection(address, timeout, source_address, socket_options)

    results: "queue.Queue" = queue.Queue()

    def attempt(info):
        try:
            results.put((open_socket(info, timeout, source_address, socket_options), None))
        except OSError as exc:
            results.put((None, exc))

    winner = None
    last_error: Optional[OSError] = None
    pending = 0
    for info in _interleave(infos):
        threading.Thread(target=attempt, args=(info,), daemon=True).start()
        pending += 1
        try:
            sock, err = results.get(timeout=CONNECTION_ATTEMPT_DELAY)
        except queue.Empty:
            continue
        pending -= 1
        if sock is not None:
            winner = sock
            break
        last_error = err

    while winner is None and pending:
        sock, err = results.get()
        pending -= 1
        if sock is not None:
            winner = sock
        else:
            last_error = err

    if pending:
        threading.Thread(target=_close_stragglers, args=(results, pending), daemon=True).start()
    if winner is not None:
        return winner
    if last_error is not None:
        raise last_error
    raise OSError("getaddrinfo returns an empty list")


def set_default_auto_select_family(enabled: bool) -> None:
    urllib3_connection.create_connection = create_connection if enabled else _original_create_connection


def get_default_auto_select_family() -> bool:
    return urllib3_connection.create_connection is create_connection


def probe_auto_select_family() -> Optional[Callable[[bool], None]]:
    """Return the racing toggle, or ``None`` when urllib3 offers no hook for it."""
    if not callable(getattr(urllib3_connection, "create_connection", None)):
        return None
    return set_default_auto_select_family
