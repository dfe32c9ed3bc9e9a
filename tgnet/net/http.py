"""HTTP helpers providing resilient sessions and the transports built on them."""

from __future__ import annotations

import functools
import threading
from typing import Callable, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tgnet.config.constants import DEFAULT_RETRIES

Transport = Callable[..., requests.Response]


def build_retry(
    total: int = DEFAULT_RETRIES,
    backoff: float = 0.5,
    status_forcelist: tuple[int, ...] = (429, 500, 502, 503, 504),
    allowed_methods: frozenset[str] | None = None,
) -> Retry:
    """Retry policy for Bot API calls.

    Retries transient 429/5xx responses and honours Telegram's ``Retry-After``
    header, following urllib3's Retry docs.
    """

    methods = allowed_methods or frozenset({"GET", "POST"})
    return Retry(
        total=total,
        read=total,
        connect=total,
        backoff_factor=backoff,
        status_forcelist=status_forcelist,
        allowed_methods=methods,
        respect_retry_after_header=True,
        raise_on_status=False,
    )


def retry_session(total: int = DEFAULT_RETRIES, **retry_kwargs) -> requests.Session:
    """Create a requests session with retry configuration."""

    session = requests.Session()
    adapter = HTTPAdapter(max_retries=build_retry(total, **retry_kwargs))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class SessionTransport:
    """Transport function backed by lazily created ``requests`` sessions.

    Calls carrying a ``dispatcher`` adapter go through a session that has that
    adapter mounted for both schemes; one session is kept per adapter.
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._sessions: dict[Optional[HTTPAdapter], requests.Session] = {}
        self._lock = threading.Lock()

    def session_for(self, dispatcher: Optional[HTTPAdapter] = None) -> requests.Session:
        with self._lock:
            session = self._sessions.get(dispatcher)
            if session is None:
                session = self._session_factory()
                if dispatcher is not None:
                    session.mount("https://", dispatcher)
                    session.mount("http://", dispatcher)
                self._sessions[dispatcher] = session
            return session

    def __call__(self, url, method: str = "GET", dispatcher: Optional[HTTPAdapter] = None, **options) -> requests.Response:
        return self.session_for(dispatcher).request(method, url, **options)

    def close(self) -> None:
        with self._lock:
            for session in self._sessions.values():
                session.close()
            self._sessions.clear()


default_transport = SessionTransport(retry_session)


def proxy_transport(proxy_url: str, retries: int = DEFAULT_RETRIES) -> SessionTransport:
    """Transport routing every request through ``proxy_url`` (http, https or socks5)."""

    def factory() -> requests.Session:
        session = retry_session(total=retries)
        session.proxies = {"http": proxy_url, "https": proxy_url}
        return session

    return SessionTransport(factory)


def normalize_transport(transport: Optional[Transport]) -> Optional[Transport]:
    """Adapt ``transport`` to the canonical ``transport(url, **options)`` call.

    The method is upper-cased (default ``GET``); every other option, ``timeout``
    included, is forwarded as given.
    """
    if transport is None:
        return None
    if getattr(transport, "__tgnet_normalized__", False):
        return transport

    @functools.wraps(transport)
    def normalized(url, **options):
        options["method"] = (options.get("method") or "GET").upper()
        return transport(url, **options)

    normalized.__tgnet_normalized__ = True
    return normalized


def with_default_timeout(transport: Transport, timeout) -> Transport:
    """Give calls that pass no ``timeout`` the channel's configured one."""

    @functools.wraps(transport)
    def timed(url, **options):
        options.setdefault("timeout", timeout)
        return transport(url, **options)

    return timed
