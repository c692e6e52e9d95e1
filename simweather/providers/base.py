from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from typing import Callable, Optional

import requests
from requests import Response
from requests.adapters import HTTPAdapter

from .. import settings
from ..entities import FetchStatus


class ProviderError(RuntimeError):
    """Base provider error."""

    status = FetchStatus.TRANSPORT_ERROR


class TransportError(ProviderError):
    """Raised when no HTTP response could be obtained (connection, TLS, timeout)."""


class ProtocolError(ProviderError):
    """Raised on a non-200 HTTP status or an error reported by the service."""

    status = FetchStatus.PROTOCOL_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(ProviderError):
    """Raised when a mandatory field is present but unreadable."""

    status = FetchStatus.PARSE_ERROR


# Windows schannel reports CRYPT_E_NO_REVOCATION_CHECK / CRYPT_E_REVOCATION_OFFLINE
_REVOCATION_MARKERS = ("revocation", "0x80092012", "0x80092013")


def is_revocation_error(text: str) -> bool:
    """True if a transport error text describes a failed revocation check."""
    lowered = (text or "").lower()
    return any(marker in lowered for marker in _REVOCATION_MARKERS)


class NoRevocationCheckAdapter(HTTPAdapter):
    """HTTPS adapter that marks the session as mitigated.

    ``ssl.create_default_context()`` sets no CRL flags, so TLS verification is
    unchanged; the revocation retry in ``WeatherProvider._request`` is what
    matters.
    """

    def init_poolmanager(self, *args, **kwargs):
        context = ssl.create_default_context()
        context.verify_flags &= ~(ssl.VERIFY_CRL_CHECK_LEAF | ssl.VERIFY_CRL_CHECK_CHAIN)
        kwargs["ssl_context"] = context
        return super().init_poolmanager(*args, **kwargs)


@dataclass
class RequestConfig:
    timeout: float = settings.NETWORK_TIMEOUT
    user_agent: str = settings.USER_AGENT
    timeout_getter: Optional[Callable[[], float]] = None

    def current_timeout(self) -> float:
        """Timeout in seconds, asking the host application when it supplies one."""
        if self.timeout_getter is not None:
            return float(self.timeout_getter())
        return self.timeout


class WeatherProvider:
    """Base class for HTTP providers: session, timeouts, status and TLS handling."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
        revocation_classifier: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or self._build_session(self.request_config)
        self.is_revocation_error = revocation_classifier or is_revocation_error
        self.revocation_check_disabled = False
        self.revocation_retried = False
        self._log = logging.getLogger(self.__class__.__name__)

    def _build_session(self, config: RequestConfig) -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = config.user_agent
        return session

    def disable_revocation_check(self) -> None:
        """Stop checking certificate revocation for this provider's session."""
        if not self.revocation_check_disabled:
            self.session.mount("https://", NoRevocationCheckAdapter())
            self.revocation_check_disabled = True

    def begin_fetch(self) -> None:
        """Allow one revocation retry for the fetch about to start."""
        self.revocation_retried = False

    def _handle_response(self, response: Response) -> Response:
        if response.status_code != 200:
            self._log.error("Could not request weather: HTTP return code %s", response.status_code)
            raise ProtocolError(f"HTTP {response.status_code}", status_code=response.status_code)
        return response

    def _send(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.current_timeout(),
                **kwargs,
            )
        except requests.Timeout as exc:
            raise TransportError(f"timeout: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        if settings.TESTING_MODE:
            self._log.info("%s %s -> %s: %s", method, url, response.status_code, response.text[:500])
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self._send(method, url, **kwargs)
        except TransportError as exc:
            if self.revocation_retried or not self.is_revocation_error(str(exc)):
                self._log.error("Weather request failed: %s", exc)
                raise
            self._log.warning("Revocation check failed, retrying without revocation check: %s", exc)
            self.disable_revocation_check()
            self.revocation_retried = True
            try:
                response = self._send(method, url, **kwargs)
            except TransportError as retry_exc:
                self._log.error("Weather request failed: %s", retry_exc)
                raise
        return self._handle_response(response)


__all__ = [
    "WeatherProvider",
    "ProviderError",
    "TransportError",
    "ProtocolError",
    "ParseError",
    "RequestConfig",
    "NoRevocationCheckAdapter",
    "is_revocation_error",
]
