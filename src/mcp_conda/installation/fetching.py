"""Installer download."""
import asyncio
from pathlib import Path

import aiohttp

from mcp_conda.config import DEFAULT_DOWNLOAD_TIMEOUT
from mcp_conda.errors import DownloadError
from mcp_conda.logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 8192


async def download_url(url: str, dest: Path, timeout: float = DEFAULT_DOWNLOAD_TIMEOUT) -> Path:
    """Download url to dest with bounded connect and read timeouts."""
    client_timeout = aiohttp.ClientTimeout(
        total=None, sock_connect=timeout, sock_read=timeout
    )

    logger.info({"event": "download_start", "url": url, "destination": str(dest)})

    try:
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(url) as response:
                if response.status != 200:
                    raise DownloadError(url, f"HTTP status {response.status}")

                size = 0
                with open(dest, "wb") as f:
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        f.write(chunk)
                        size += len(chunk)

    except DownloadError as e:
        logger.error({"event": "download_failed", "url": url, "error": str(e)})
        if dest.exists():
            dest.unlink()
        raise
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        reason = str(e) or e.__class__.__name__
        logger.error({"event": "download_failed", "url": url, "error": reason})
        if dest.exists():
            dest.unlink()
        raise DownloadError(url, reason) from e

    logger.info({"event": "download_complete", "url": url, "size": size})

    return dest


async def fetch_installer(url: str, dest_dir: Path, timeout: float = DEFAULT_DOWNLOAD_TIMEOUT) -> Path:
    """Download the installer into dest_dir, keeping its file name."""
    dest = dest_dir / Path(url).name
    await download_url(url, dest, timeout)

    if not dest.exists() or dest.stat().st_size == 0:
        raise DownloadError(url, "downloaded installer is missing or empty")

    return dest
