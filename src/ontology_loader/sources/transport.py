"""
Document Transport

Fetches the bytes behind a locator when a document source offers no stream.
``http``/``https`` locators are fetched with requests, retrying transient
failures (timeouts, connection errors, 429/5xx) with tenacity and following
redirects one validated hop at a time. ``file`` locators are read from disk.
Every failure is reported as OntologyIOError.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, TYPE_CHECKING
from urllib.parse import urljoin

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import FetchConfig
from ..core.errors import OntologyIOError
from ..core.validators.url import URLValidator
from .locator import DocumentLocator

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from ..core.config import LoaderConfiguration

logger = logging.getLogger(__name__)


@dataclass
class FetchedDocument:
    """Raw bytes fetched for a locator."""
    locator: DocumentLocator
    data: bytes
    media_type: Optional[str] = None
    charset: Optional[str] = None
    final_url: Optional[str] = None


class DocumentFetcher(Protocol):
    """Transport collaborator: turns a locator into bytes or fails."""

    def fetch(
        self, locator: DocumentLocator, configuration: "LoaderConfiguration"
    ) -> FetchedDocument:
        ...


class TransientFetchError(Exception):
    """HTTP status that is worth retrying (rate limiting, gateway errors)."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Transient error (HTTP {status_code}) fetching {url}")


def _is_transient_error(exception: BaseException) -> bool:
    """Check if exception is a transient error that should be retried."""
    if isinstance(exception, TransientFetchError):
        return True
    if isinstance(exception, (requests.exceptions.Timeout, requests.exceptions.ConnectionError)):
        return True
    return False


def parse_content_type(header: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split a Content-Type header into (media type, charset)."""
    if not header:
        return None, None
    pieces = [piece.strip() for piece in header.split(';')]
    media_type = pieces[0].lower() or None
    charset = None
    for param in pieces[1:]:
        name, _, value = param.partition('=')
        if name.strip().lower() == 'charset' and value:
            charset = value.strip().strip('"')
    return media_type, charset


class HTTPDocumentFetcher:
    """
    Default transport for file and HTTP(S) locators.

    Args:
        session: Optional requests session (shared connection pool).
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def fetch(
        self, locator: DocumentLocator, configuration: "LoaderConfiguration"
    ) -> FetchedDocument:
        scheme = locator.scheme
        if scheme not in configuration.allowed_protocols:
            raise OntologyIOError(
                f"Locator scheme '{scheme}' is not allowed "
                f"(allowed: {', '.join(configuration.allowed_protocols)})",
                locator=str(locator),
            )

        if locator.is_file:
            return self._read_file(locator)
        if locator.is_network:
            return self._fetch_http(locator, configuration)

        raise OntologyIOError(
            f"No transport available for scheme '{scheme}'", locator=str(locator)
        )

    def _read_file(self, locator: DocumentLocator) -> FetchedDocument:
        path = locator.to_path()
        logger.debug(f"Reading document from file {path}")
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise OntologyIOError(f"File not found: {path}", locator=str(locator), cause=e) from e
        except OSError as e:
            raise OntologyIOError(f"Cannot read {path}: {e}", locator=str(locator), cause=e) from e
        return FetchedDocument(locator=locator, data=data)

    def _fetch_http(
        self, locator: DocumentLocator, configuration: "LoaderConfiguration"
    ) -> FetchedDocument:
        url = str(locator)
        safe_url = URLValidator.sanitize_url_for_logging(url)
        try:
            URLValidator.validate_url(
                url,
                allowed_protocols=configuration.allowed_protocols,
                allow_private_ips=configuration.allow_private_networks,
            )
        except ValueError as e:
            raise OntologyIOError(str(e), locator=url, cause=e) from e

        retrying = Retrying(
            stop=stop_after_attempt(configuration.fetch_max_attempts),
            wait=wait_exponential(
                multiplier=1,
                min=FetchConfig.RETRY_MIN_WAIT_SECONDS,
                max=FetchConfig.RETRY_MAX_WAIT_SECONDS,
            ),
            retry=retry_if_exception(_is_transient_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        try:
            response = retrying(self._get, url, configuration)
        except TransientFetchError as e:
            raise OntologyIOError(
                f"Server kept returning HTTP {e.status_code}", locator=url, cause=e
            ) from e
        except requests.exceptions.Timeout as e:
            raise OntologyIOError(
                f"Timed out after {configuration.connection_timeout}s", locator=url, cause=e
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise OntologyIOError(f"Connection failed: {e}", locator=url, cause=e) from e
        except requests.exceptions.RequestException as e:
            raise OntologyIOError(f"Request failed: {e}", locator=url, cause=e) from e

        media_type, charset = parse_content_type(response.headers.get('Content-Type'))
        logger.info(
            f"Fetched {safe_url} ({len(response.content)} bytes, {media_type or 'unknown type'})"
        )
        return FetchedDocument(
            locator=locator,
            data=response.content,
            media_type=media_type,
            charset=charset,
            final_url=response.url,
        )

    def _check_redirect(self, url: str, target: str, configuration: "LoaderConfiguration") -> None:
        """Redirect targets get the same checks as the locator itself."""
        network_protocols = [p for p in configuration.allowed_protocols if p in ('http', 'https')]
        try:
            URLValidator.validate_url(
                target,
                allowed_protocols=network_protocols or ['http', 'https'],
                allow_private_ips=configuration.allow_private_networks,
            )
        except ValueError as e:
            raise OntologyIOError(
                f"Refusing redirect to {URLValidator.sanitize_url_for_logging(target)}: {e}",
                locator=url,
                cause=e,
            ) from e

    def _get(self, url: str, configuration: "LoaderConfiguration") -> requests.Response:
        # Redirects are followed by hand so every hop is validated before it is requested
        current = url
        for _ in range(FetchConfig.MAX_REDIRECTS + 1):
            logger.debug(f"GET {URLValidator.sanitize_url_for_logging(current)}")
            response = self.session.get(
                current,
                headers={
                    'Accept': ', '.join(configuration.accept_headers),
                    'User-Agent': FetchConfig.USER_AGENT,
                },
                timeout=configuration.connection_timeout,
                allow_redirects=False,
            )
            location = response.headers.get('Location')
            if response.status_code not in FetchConfig.REDIRECT_STATUS_CODES or not location:
                break
            target = urljoin(current, location)
            self._check_redirect(url, target, configuration)
            logger.debug(f"Redirected to {URLValidator.sanitize_url_for_logging(target)}")
            current = target
        else:
            raise OntologyIOError(f"Too many redirects (more than {FetchConfig.MAX_REDIRECTS})", locator=url)

        # Sessions with their own redirect handling report where they ended up
        if isinstance(response.url, str) and response.url != current:
            self._check_redirect(url, response.url, configuration)

        if response.status_code in FetchConfig.TRANSIENT_STATUS_CODES:
            logger.warning(f"HTTP {response.status_code} from {URLValidator.sanitize_url_for_logging(current)}")
            raise TransientFetchError(response.status_code, current)
        if response.status_code >= 400:
            raise OntologyIOError(
                f"HTTP {response.status_code} {response.reason or ''}".strip(),
                locator=url,
            )
        return response
