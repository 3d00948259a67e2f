"""Fetch the noise track to local disk on first use"""

import logging
from pathlib import Path

import requests

from .errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK = 64 * 1024


def download_if_missing(path, url: str, session=None) -> bool:
    """Download url to path unless path already exists.

    Returns True when a download happened. A transfer that fails halfway
    leaves the partial file behind, and later calls will treat it as
    present.
    """
    path = Path(path)
    if path.exists():
        return False

    http = session or requests
    logger.info('Downloading %s to %s', url, path)
    try:
        response = http.get(url, stream=True)
        response.raise_for_status()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'wb') as f:
            for chunk in response.iter_content(chunk_size=CHUNK):
                if chunk:
                    f.write(chunk)
    except requests.RequestException as e:
        raise DownloadError(str(e)) from e
    except OSError as e:
        raise DownloadError(str(e)) from e
    return True
