"""IPv4-only connection dispatch for requests."""

from __future__ import annotations

import socket
from socket import timeout as SocketTimeout

from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool
from urllib3.exceptions import ConnectTimeoutError, NameResolutionError, NewConnectionError

from tgnet.net.happy_eyeballs import open_socket
from tgnet.net.http import build_retry


def create_ipv4_connection(
    address,
    timeout=socket._GLOBAL_DEFAULT_TIMEOUT,
    source_address=None,
    socket_options=None,
) -> socket.socket:
    """Like ``urllib3.util.connection.create_connection`` but resolves ``AF_INET`` only."""
    host, port = address
    err = None
    for info in socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM):
        try:
            return open_socket(info, timeout, source_address, socket_options)
        except OSError as e:
            err = e
    if err is not None:
        raise err
    raise OSError("getaddrinfo returns an empty list")


class _IPv4ConnectionMixin:
    def _new_conn(self) -> socket.socket:
        try:
            return create_ipv4_connection(
                (self._dns_host, self.port),
                self.timeout,
                source_address=self.source_address,
                socket_options=self.socket_options,
            )
        except socket.gaierror as e:
            raise NameResolutionError(self.host, self, e) from e
        except SocketTimeout as e:
            raise ConnectTimeoutError(
                self,
                f"Connection to {self.host} timed out. (connect timeout={self.timeout})",
            ) from e
        except OSError as e:
            raise NewConnectionError(self, f"Failed to establish a new connection: {e}") from e


class IPv4HTTPConnection(_IPv4ConnectionMixin, HTTPConnection):
    pass


class IPv4HTTPSConnection(_IPv4ConnectionMixin, HTTPSConnection):
    pass


class IPv4HTTPConnectionPool(HTTPConnectionPool):
    ConnectionCls = IPv4HTTPConnection


class IPv4HTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = IPv4HTTPSConnection


IPV4_POOL_CLASSES = {"http": IPv4HTTPConnectionPool, "https": IPv4HTTPSConnectionPool}


def _pin(manager):
    manager.pool_classes_by_scheme = dict(IPV4_POOL_CLASSES)
    return manager


class IPv4Adapter(HTTPAdapter):
    """Transport adapter whose connections only ever use the IPv4 address family.

    Covers direct connections and HTTP(S) proxies; SOCKS proxies resolve the
    target themselves and are left alone.
    """

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        _pin(self.poolmanager)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        manager = super().proxy_manager_for(proxy, **proxy_kwargs)
        if not proxy.lower().startswith("socks"):
            _pin(manager)
        return manager


IPV4_ADAPTER = IPv4Adapter(max_retries=build_retry())


def force_ipv4_transport(base):
    """Wrap ``base`` so every call is dispatched through ``IPV4_ADAPTER``."""

    def transport(url, **options):
        return base(url, **{**options, "dispatcher": IPV4_ADAPTER})

    return transport
