"""
Locator validation and SSRF protection for document fetches.

Import declarations come from untrusted documents, so every network locator
is checked before the transport dereferences it:

- Scheme must be one of the configured protocols
- http(s) locators need a hostname
- Private/loopback addresses are refused unless explicitly allowed

Usage:
    from ontology_loader.core.validators.url import URLValidator

    url = URLValidator.validate_url(
        "https://www.w3.org/2002/07/owl",
        allowed_protocols=["https"],
        allow_private_ips=False,
    )
"""

import ipaddress
import logging
import socket
from typing import Any, Iterable, Optional
from urllib.parse import urlparse, urlunparse

logger = logging.getLogger(__name__)


class URLValidator:
    """
    SSRF (Server-Side Request Forgery) protection for locator handling.

    Ontology documents can import arbitrary IRIs; without these checks a
    hostile document could make the loader reach internal services.
    """

    DEFAULT_ALLOWED_PROTOCOLS = ['http', 'https']

    LOCALHOST_NAMES = {'localhost', 'localhost.localdomain'}

    @classmethod
    def _is_private_address(cls, address: str) -> bool:
        """Check if a literal IPv4/IPv6 address is private or reserved."""
        try:
            ip = ipaddress.ip_address(address)
        except ValueError:
            return False
        return (
            ip.is_private
            or ip.is_loopback
            or ip.is_link_local
            or ip.is_multicast
            or ip.is_reserved
            or ip.is_unspecified
        )

    @classmethod
    def _is_private_host(cls, hostname: str, check_dns: bool) -> bool:
        """Check if hostname is, or resolves to, a private address."""
        if hostname in cls.LOCALHOST_NAMES:
            return True
        if cls._is_private_address(hostname):
            return True
        if not check_dns:
            return False
        try:
            info = socket.getaddrinfo(hostname, None)
        except socket.gaierror:
            logger.warning(f"Could not resolve hostname: {hostname}")
            return False
        return any(cls._is_private_address(sockaddr[0]) for _, _, _, _, sockaddr in info)

    @classmethod
    def validate_url(
        cls,
        url: Any,
        allowed_protocols: Optional[Iterable[str]] = None,
        allow_private_ips: bool = True,
        check_dns: bool = True,
    ) -> str:
        """
        Validate a locator before it is fetched.

        Args:
            url: Locator to validate
            allowed_protocols: Allowed schemes (default: http, https)
            allow_private_ips: If False, refuse private/internal hosts
            check_dns: If True, resolve hostnames for the private-host check

        Returns:
            Validated URL string

        Raises:
            TypeError: If URL is not a string
            ValueError: If URL is empty, uses a disallowed scheme or host
        """
        if not isinstance(url, str):
            raise TypeError(f"URL must be string, got {type(url).__name__}")

        url = url.strip()
        if not url:
            raise ValueError("URL cannot be empty")

        parsed = urlparse(url)
        protocols = [p.lower() for p in (allowed_protocols or cls.DEFAULT_ALLOWED_PROTOCOLS)]

        if not parsed.scheme:
            raise ValueError("URL must include protocol scheme (e.g., https://)")

        scheme = parsed.scheme.lower()
        if scheme not in protocols:
            raise ValueError(
                f"URL protocol '{parsed.scheme}' not allowed. "
                f"Allowed protocols: {', '.join(protocols)}"
            )

        if scheme in ('http', 'https'):
            if not parsed.hostname:
                raise ValueError("URL must include a hostname")
            if not allow_private_ips and cls._is_private_host(parsed.hostname.lower(), check_dns):
                raise ValueError(
                    f"SSRF Protection: URL points to private/internal address. "
                    f"Hostname: {parsed.hostname}"
                )

        return url

    @classmethod
    def is_url(cls, value: Any) -> bool:
        """Check if a string looks like a network URL."""
        if not isinstance(value, str):
            return False
        return value.strip().lower().startswith(('http://', 'https://', 'ftp://'))

    @classmethod
    def sanitize_url_for_logging(cls, url: str) -> str:
        """
        Remove sensitive parts from URL for safe logging.

        Returns:
            URL with credentials, query and fragment removed
        """
        try:
            parsed = urlparse(url)
            netloc = parsed.hostname or ''
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc, query='', fragment=''))
        except ValueError:
            return "[URL sanitization failed]"
