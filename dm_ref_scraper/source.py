"""Read the monolithic reference document from disk or over HTTP.

Failing to obtain the reference is a run-level error: the generator raises
:class:`ReferenceSourceError` before anything is written.

Example
-------
>>> from dm_ref_scraper.source import read_reference
>>> html = read_reference("info.html")  # doctest: +SKIP
>>> html = read_reference("https://www.byond.com/docs/ref/info.html")  # doctest: +SKIP
"""

from __future__ import annotations

from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

REMOTE_PREFIXES = ("http://", "https://")


class ReferenceSourceError(RuntimeError):
    """Raised when the reference document cannot be read or downloaded."""


def is_remote(location: str) -> bool:
    """Return ``True`` when ``location`` is an http(s) URL."""
    return location.lower().startswith(REMOTE_PREFIXES)


def read_reference(
    location: str | Path,
    *,
    session: requests.Session | None = None,
    timeout: float = 30.0,
) -> str:
    """Return the reference HTML found at ``location``.

    Parameters
    ----------
    location : str | Path
        Local file path or http(s) URL.
    session : requests.Session, optional
        Session used for remote downloads; a retrying session is created and
        closed when omitted.
    timeout : float, optional
        Per-request timeout in seconds. Defaults to ``30.0``.

    Raises
    ------
    ReferenceSourceError
        If the file cannot be read or the download fails.
    """
    text = str(location)
    if is_remote(text):
        return _download(text, session=session, timeout=timeout)
    path = Path(location)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Unable to read reference document '{path}': {exc}"
        raise ReferenceSourceError(msg) from exc


def _retrying_session() -> requests.Session:
    """Return a session that retries transient server errors."""
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _download(url: str, *, session: requests.Session | None, timeout: float) -> str:
    """Fetch ``url`` and return its decoded body."""
    owned = session is None
    active = session or _retrying_session()
    try:
        resp = active.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    except requests.RequestException as exc:
        msg = f"Unable to download reference document '{url}': {exc}"
        raise ReferenceSourceError(msg) from exc
    finally:
        if owned:
            active.close()


__all__ = ["ReferenceSourceError", "is_remote", "read_reference"]
