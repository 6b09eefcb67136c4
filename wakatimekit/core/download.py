"""
Remote fetcher for the interpreter and wakatime-cli archives.

Downloads go over TLS-verified HTTPS first. Some environments ship a broken
certificate store, so when verification itself fails the request is repeated
once with certificate verification disabled. That fallback is always logged
at WARNING level so it can be audited.

Neither ``fetch`` nor ``fetch_to_file`` raises: failures are logged and
reported through the return value, the caller decides how to degrade.
"""

import logging
import warnings
from pathlib import Path
from typing import Union

import requests
import urllib3
from requests.exceptions import RequestException, SSLError

from wakatimekit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 4096


def _get(url: str, verify: bool, stream: bool, timeout: int) -> requests.Response:
    """Issue a GET, suppressing urllib3's insecure-request warning when unverified."""
    if verify:
        response = requests.get(url, stream=stream, timeout=timeout, verify=True)
    else:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", urllib3.exceptions.InsecureRequestWarning)
            response = requests.get(url, stream=stream, timeout=timeout, verify=False)
    response.raise_for_status()
    return response


def _open(url: str, stream: bool, timeout: int) -> requests.Response:
    """
    Open a response, falling back to an unverified transport on TLS errors.

    Raises:
        DownloadError: If both transports fail
    """
    try:
        return _get(url, verify=True, stream=stream, timeout=timeout)
    except SSLError as e:
        logger.error(f"TLS error fetching {url}: {e}")
        logger.warning(
            f"Retrying {url} without verifying the server certificate. "
            "TLS certificate verification was bypassed for this download."
        )
        try:
            return _get(url, verify=False, stream=stream, timeout=timeout)
        except RequestException as e2:
            raise DownloadError(f"Unverified download of {url} failed: {e2}") from e2
    except RequestException as e:
        raise DownloadError(f"Download of {url} failed: {e}") from e


def fetch(url: str, timeout: int = DEFAULT_TIMEOUT) -> bytes:
    """
    Fetch a URL into memory.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds

    Returns:
        Response body, or ``b""`` if every transport failed

    Example:
        >>> body = fetch("https://example.com/about.py")
    """
    try:
        response = _open(url, stream=False, timeout=timeout)
        return response.content
    except DownloadError as e:
        logger.error(str(e))
        return b""


def fetch_text(url: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Fetch a URL as UTF-8 text, ``""`` on failure."""
    return fetch(url, timeout=timeout).decode("utf-8", errors="replace")


def fetch_to_file(
    url: str, destination: Union[str, Path], timeout: int = DEFAULT_TIMEOUT
) -> bool:
    """
    Download a URL to a local file.

    Parent directories of ``destination`` are created as needed.

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Request timeout in seconds

    Returns:
        True if the file was written completely, False otherwise

    Example:
        >>> fetch_to_file(
        ...     "https://codeload.github.com/wakatime/wakatime/zip/master",
        ...     Path("res/wakatime-cli.zip"),
        ... )
        True
    """
    destination = Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Cannot create download directory {destination.parent}: {e}")
        return False

    logger.debug(f"Downloading {url} to {destination}")

    try:
        response = _open(url, stream=True, timeout=timeout)
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
    except DownloadError as e:
        logger.error(str(e))
        return False
    except (RequestException, OSError) as e:
        logger.error(f"Error while writing {destination}: {e}")
        return False

    logger.debug(f"Download complete: {destination}")
    return True
