"""
TreeMirror Server - Main FastAPI Application

This module builds the FastAPI application serving a scanned directory:
- GET /dir      directory tree summary
- GET /list     prefix file listing (optionally refreshed)
- GET /files/*  raw file content from the served root
- GET /health   health check

The root is scanned once, to completion, before uvicorn starts accepting
requests.
"""

import argparse
import logging
import socket
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from treemirror_server import __version__
from treemirror_server.catalog import CatalogService
from treemirror_server.generate_ssl_cert import GenerateSSLCertificate, GetCertificatePaths
from treemirror_server.models.infrastructure import get_scan_error_message

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8000
DEFAULT_HOST = "localhost"
FILES_MOUNT_POINT = "/files"
ERROR_PAGE = "<p>Error Status: <span style='color:red;'>%d</span></p>"


# ==================== Logging ====================

def ConfigureLogging(verbose: bool = False, log_dir: Optional[Path] = Path("logs")) -> None:
    """
    Configure logging to write to both console and file

    Args:
        verbose: Log at DEBUG instead of INFO
        log_dir: Directory for the rotating log file; None logs to console only
    """
    handlers = [logging.StreamHandler()]

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_filename = log_dir / f"treemirror-server-{datetime.now().strftime('%Y-%m-%d')}.log"
        # File handler with rotation (max 10MB per file, keep 10 backup files)
        handlers.append(RotatingFileHandler(
            log_filename,
            maxBytes=10 * 1024 * 1024,
            backupCount=10,
            encoding='utf-8'
        ))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


# ==================== FastAPI Application ====================

def CreateApp(catalog: CatalogService) -> FastAPI:
    """
    Build the FastAPI application around a loaded catalog

    Args:
        catalog: Catalog whose root has already been scanned

    Returns:
        FastAPI: application with catalog routes and the /files mount
    """
    app = FastAPI(
        title="TreeMirror Server",
        description="Directory mirroring server",
        version=__version__
    )
    app.state.catalog = catalog

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.debug(f"{request.method} {request.url.path} -> {exc.status_code}")
        return HTMLResponse(ERROR_PAGE % exc.status_code, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"{request.method} {request.url.path} -> invalid request: {exc.errors()}")
        return HTMLResponse(ERROR_PAGE % 422, status_code=422)

    from treemirror_server.routes import catalog as catalog_routes, status as status_routes

    app.include_router(catalog_routes.router)
    app.include_router(status_routes.router)

    # Raw file access for clients fetching content, symlinked files included
    app.mount(FILES_MOUNT_POINT, StaticFiles(directory=str(catalog.root), follow_symlink=True), name="files")
    logger.info(f"mount point: {FILES_MOUNT_POINT}/ -> {catalog.root}")

    return app


# ==================== Main Entry Point ====================

def BuildArgumentParser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='TreeMirror - file synchronize server'
    )
    parser.add_argument('dir', nargs='?', default='.',
                        help='Target directory to serve (default: current directory)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose mode')
    parser.add_argument('-r', '--recursive', action='store_true',
                        help='Scan subdirectories recursively')
    parser.add_argument('-p', '--port', type=int, default=DEFAULT_PORT,
                        help=f'Port number (default: {DEFAULT_PORT})')
    parser.add_argument('-a', '--auto', action='store_true',
                        help='Bind to any free port on all interfaces and print it')
    parser.add_argument('--host', default=None,
                        help=f'Interface to listen on (default: {DEFAULT_HOST}, 0.0.0.0 with --auto)')
    parser.add_argument('--ssl', action='store_true', help='Enable SSL')
    parser.add_argument('--ssl_cert_path', default='.',
                        help='Directory containing cert.pem and key.pem')
    parser.add_argument('--generate-cert', action='store_true',
                        help='Create a self-signed cert.pem/key.pem in --ssl_cert_path if missing')
    parser.add_argument('--no-log-file', action='store_true',
                        help='Log to the console only')
    return parser


def main(argv=None) -> int:
    """
    Scan the target directory and serve it

    Returns:
        Exit code: 0 on clean shutdown, 1 on startup failure
    """
    args = BuildArgumentParser().parse_args(argv)
    ConfigureLogging(args.verbose, None if args.no_log_file else Path("logs"))

    # Collect file list before accepting any request
    catalog = CatalogService(args.dir, recursive=args.recursive)
    scan_result = catalog.Rescan()
    if not scan_result.ok:
        logger.error(get_scan_error_message(scan_result))
        return 1

    logger.info(f"read dir: {catalog.root.name}({catalog.root})")
    app = CreateApp(catalog)

    ssl_options = {}
    if args.ssl:
        if args.generate_cert:
            GenerateSSLCertificate(args.ssl_cert_path)
        cert_path, key_path = GetCertificatePaths(args.ssl_cert_path)
        if not cert_path.exists() or not key_path.exists():
            logger.error(f"SSL certificate files not found: {cert_path}, {key_path}")
            return 1
        logger.info(f"enable SSL server, cert path: {cert_path.parent}")
        ssl_options = {"ssl_certfile": str(cert_path), "ssl_keyfile": str(key_path)}

    host = args.host or ("0.0.0.0" if args.auto else DEFAULT_HOST)

    if args.auto:
        # Let the OS pick the port, then hand the bound socket to uvicorn
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, 0))
        except OSError as e:
            logger.error(f"Cannot bind to {host}: {e}")
            sock.close()
            return 1
        port = sock.getsockname()[1]
        print(f"port number: {port}")
        config = uvicorn.Config(app, log_level="debug" if args.verbose else "info", **ssl_options)
        uvicorn.Server(config).run(sockets=[sock])
        return 0

    logger.info(f"start server on {host}:{args.port}...")
    uvicorn.run(
        app,
        host=host,
        port=args.port,
        log_level="debug" if args.verbose else "info",
        **ssl_options
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
