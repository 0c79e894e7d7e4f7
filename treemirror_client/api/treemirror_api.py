"""
TreeMirror Client - API Communication Module

Handles all communication with the TreeMirror server via HTTP:
- GET /dir    directory tree
- GET /list   file catalog for a prefix
- GET /files  streamed file content
"""

import json
import logging
from typing import Iterator, List, Optional, Tuple
from urllib.parse import quote

import requests

from treemirror_client.exceptions import (
    TreeMirrorServerError,
    TreeMirrorParseError,
    TreeMirrorTransferError
)
from treemirror_client.models import (
    RemoteDirectory,
    RemoteFile,
    parse_directory,
    parse_file_list
)

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 65536


class TreeMirrorAPI:
    """
    API client for communicating with a TreeMirror server.

    Responsibilities:
    - Fetch and parse the directory tree and file catalog
    - Stream file content with cumulative progress
    - Translate transport failures into TreeMirror exceptions
    """

    def __init__(self, server_url: str, server_port: int, verify_ssl: bool = True,
                 timeout: float = 30, download_timeout: float = 300):
        """
        Initialize API client.

        Args:
            server_url: Base URL or host of server (e.g., "http://nas.local" or "nas.local")
            server_port: Server port number (e.g., 8000)
            verify_ssl: Whether to verify SSL certificates
            timeout: Timeout in seconds for catalog requests
            download_timeout: Timeout in seconds between bytes of a download
        """
        if "://" not in server_url:
            server_url = f"http://{server_url}"
        self.base_url = f"{server_url.rstrip('/')}:{server_port}"
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.download_timeout = download_timeout
        # Use session for connection pooling to avoid TCP handshake overhead on each request
        self.session = requests.Session()
        logger.debug(f"Initialized API client for {self.base_url} (SSL verification: {self.verify_ssl})")

    def close(self):
        """
        Close the session and release resources.

        Should be called when done using the API client.
        """
        if getattr(self, 'session', None):
            self.session.close()
            logger.debug("API client session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _get_json(self, endpoint: str, params: Optional[dict] = None):
        """
        Make a catalog GET request and decode its JSON body.

        Raises:
            TreeMirrorServerError: On connection failure or non-200 status
            TreeMirrorParseError: If the body is not JSON
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"API request: GET {endpoint} {params or ''}")

        try:
            response = self.session.get(url, params=params, verify=self.verify_ssl, timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Cannot connect to server at {self.base_url}: {e}")
            raise TreeMirrorServerError(f"Cannot connect to server at {self.base_url}")
        except requests.exceptions.Timeout:
            logger.error("Request timed out")
            raise TreeMirrorServerError("Request timed out")
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {str(e)}")
            raise TreeMirrorServerError(f"Request error: {str(e)}")

        if response.status_code != 200:
            logger.error(f"Request {endpoint} failed with status {response.status_code}")
            raise TreeMirrorServerError(f"Request {endpoint} failed with status {response.status_code}")

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise TreeMirrorParseError(f"Invalid JSON from {endpoint}: {e}")

    # ==================== Catalog Endpoints ====================

    def get_directory(self) -> RemoteDirectory:
        """
        Get the server's directory tree.

        Returns:
            RemoteDirectory root node

        Raises:
            TreeMirrorServerError: If the request fails or the response is malformed
        """
        return parse_directory(self._get_json("/dir"))

    def list_files(self, prefix: str = "", update: bool = False) -> List[RemoteFile]:
        """
        List catalog files under a path prefix.

        Args:
            prefix: Catalog path prefix ("" for everything)
            update: Ask the server to re-check its files first so deletions
                    and changes since its scan are reported

        Returns:
            List of RemoteFile entries

        Raises:
            TreeMirrorServerError: If the request fails or the response is malformed
        """
        params = {"prefix": prefix}
        if update:
            params["update"] = "true"
        files = parse_file_list(self._get_json("/list", params=params))
        logger.info(f"Server listed {len(files)} files for prefix '{prefix}'")
        return files

    # ==================== File Content ====================

    def file_url(self, file_path: str) -> str:
        return f"{self.base_url}/files/{quote(file_path.lstrip('/'))}"

    def iter_file_chunks(self, file_path: str,
                         chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Tuple[bytes, int, Optional[int]]]:
        """
        Stream a file's content from the server.

        Yields:
            (chunk, bytes transferred so far, total bytes or None if unknown)

        Raises:
            TreeMirrorTransferError: On non-200 status, connection failure or
                                     a body shorter than announced
        """
        url = self.file_url(file_path)
        logger.debug(f"Streaming {url}")

        try:
            with self.session.get(url, verify=self.verify_ssl, timeout=self.download_timeout,
                                  stream=True) as response:
                logger.debug(f" response: {response.status_code}")
                if response.status_code != 200:
                    raise TreeMirrorTransferError(
                        f"Download of {file_path} failed with status {response.status_code}"
                    )

                content_length = response.headers.get("Content-Length")
                total = int(content_length) if content_length and content_length.isdigit() else None
                transferred = 0

                for chunk in response.iter_content(chunk_size=chunk_size):
                    if chunk:
                        transferred += len(chunk)
                        yield chunk, transferred, total

                if total is not None and transferred != total:
                    raise TreeMirrorTransferError(
                        f"Download of {file_path} incomplete: {transferred} of {total} bytes"
                    )

        except requests.exceptions.RequestException as e:
            logger.error(f"Download error for {file_path}: {e}")
            raise TreeMirrorTransferError(f"Download of {file_path} failed: {e}")
