"""
Network download for nodekit.

Streams a URL into a local file. There is deliberately no retry, resume or
checksum verification: the Node.js distribution server is trusted as-is
and any fault aborts the installation.
"""

import logging
from pathlib import Path
from typing import Union

import requests
from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema, RequestException

from nodekit.core.exceptions import DownloadError, MalformedURLError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def download_file(
    url: str,
    destination: Union[str, Path],
    timeout: int = 30,
) -> Path:
    """
    Download file from URL to destination, replacing any existing file.

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Request timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        MalformedURLError: If the URL cannot be requested at all
        DownloadError: If the request or the write fails

    Example:
        >>> download_file(
        ...     "http://nodejs.org/dist/npm/npm-1.4.4.tgz",
        ...     Path("target/npm.tar.gz"),
        ... )
    """
    if not url:
        raise MalformedURLError(url, "URL cannot be empty")

    destination = Path(destination)

    logger.info(f"Downloading from {url}")

    try:
        # Ensure destination directory exists
        destination.parent.mkdir(parents=True, exist_ok=True)

        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)

    except (MissingSchema, InvalidSchema, InvalidURL) as e:
        raise MalformedURLError(url, str(e)) from e
    except (RequestException, OSError) as e:
        logger.error(f"Error during download: {e}")
        # Clean up partial download on error
        destination.unlink(missing_ok=True)
        raise DownloadError(url, str(e)) from e

    logger.debug(f"Download complete: {destination}")
    return destination


__all__ = ["download_file"]
