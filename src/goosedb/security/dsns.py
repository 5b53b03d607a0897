"""DSN parsing and redaction for log-safe connection strings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlparse

from ..errors import ConfigurationError

REDACTED_VALUE = "***"


@dataclass
class DSNConfig:
    scheme: str
    username: Optional[str]
    password: Optional[str]
    host: Optional[str]
    port: Optional[int]
    database: Optional[str]
    path: str
    query: dict[str, str] = field(default_factory=dict)

    def redacted(self) -> str:
        """
        Return the DSN with the password masked and the structure preserved.
        """

        netloc = ""
        if self.username:
            netloc += self.username
            if self.password:
                netloc += f":{REDACTED_VALUE}"
            netloc += "@"
        if self.host:
            netloc += self.host
        if self.port:
            netloc += f":{self.port}"

        result = f"{self.scheme}://{netloc}{self.path or ''}"
        if self.query:
            result += f"?{urlencode(self.query)}"
        return result


def is_url_dsn(dsn: str) -> bool:
    return "://" in dsn


def parse_dsn(dsn: str) -> DSNConfig:
    if not is_url_dsn(dsn):
        raise ConfigurationError("DSN must be a URL of the form scheme://[user[:password]@]host/...")
    parsed = urlparse(dsn)
    try:
        port = parsed.port
    except ValueError as exc:
        raise ConfigurationError(f"Invalid port in DSN {parsed.scheme}://...") from exc
    query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
    return DSNConfig(
        scheme=parsed.scheme,
        username=parsed.username,
        password=parsed.password,
        host=parsed.hostname,
        port=port,
        database=parsed.path.lstrip("/") or None,
        path=parsed.path or "",
        query=query,
    )
