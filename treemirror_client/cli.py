"""
TreeMirror Client - CLI Mode Module

Implements the command-line commands:
- dir    print the server's directory tree
- files  print the server's file catalog for a prefix
- sync   mirror the catalog for a prefix into the local root

Logs to a timestamped file as well as the console.
"""

import sys
import logging
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import List, Optional

from treemirror_client.api import TreeMirrorAPI
from treemirror_client.exceptions import TreeMirrorAPIError
from treemirror_client.managers import ConfigManager, open_metadata_cache
from treemirror_client.managers.config_manager import get_base_dir
from treemirror_client.models import RemoteDirectory
from treemirror_client.operations import SyncOperations, failed_paths


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

COMMANDS = ["dir", "files", "sync"]


def setup_cli_logging(config_manager: ConfigManager, verbose: bool = False,
                      log_dir: Optional[Path] = None) -> Path:
    """
    Setup logging for CLI mode with timestamped log file.

    Creates log file with format: treemirror-YYYY-MM-DD-HH-MM-SS.log
    in a "logs" subdirectory of the base directory unless log_dir is given.

    Args:
        config_manager: ConfigManager instance for log settings
        verbose: Force DEBUG level regardless of config
        log_dir: Directory for the log file

    Returns:
        Path to the created log file
    """
    log_level = "DEBUG" if verbose else config_manager.get("log_level", "INFO")

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_dir = Path(log_dir) if log_dir else get_base_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"treemirror-{timestamp}.log"

    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout)  # Also output to console
        ]
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"TreeMirror CLI - Log file: {log_file}")
    return log_file


def cleanup_old_logs(config_manager: ConfigManager, current_log: Path):
    """
    Delete log files older than retention period.

    Args:
        config_manager: ConfigManager instance for retention settings
        current_log: Path to current log file (don't delete this)
    """
    logger = logging.getLogger(__name__)
    retention_days = config_manager.get("log_retention_days", 30)

    if retention_days <= 0:
        return  # Retention disabled

    cutoff_time = datetime.now().timestamp() - (retention_days * 86400)

    deleted_count = 0
    for log_file in current_log.parent.glob("treemirror-*.log"):
        if log_file == current_log:
            continue

        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                deleted_count += 1
        except OSError as e:
            logger.warning(f"Failed to delete old log file {log_file}: {e}")

    if deleted_count > 0:
        logger.info(f"Deleted {deleted_count} old log file(s)")


def format_directory(node: RemoteDirectory, indent: str = "",
                     parent: PurePosixPath = PurePosixPath()) -> List[str]:
    """
    Render a directory tree, one line per directory.

    Each line is "<indent>:<name>[<path from root>] (<count> files)".
    """
    full_path = parent / node.name if node.name else parent
    lines = [f"{indent}:{node.name}[{full_path}] ({node.file_count} files)"]
    for child in node.children:
        lines.extend(format_directory(child, indent + " ", full_path))
    return lines


def run_cli_command(command: str, config_mgr: ConfigManager,
                    url: Optional[str] = None, port: Optional[int] = None,
                    pattern: str = "", dest: Optional[str] = None,
                    use_cache: Optional[bool] = None, dry_run: bool = False) -> int:
    """
    Execute a CLI command.

    Values left as None fall back to the configuration.

    Args:
        command: "dir", "files" or "sync"
        config_mgr: Loaded ConfigManager
        url: Server URL or host
        port: Server port
        pattern: Catalog path prefix
        dest: Local root for sync
        use_cache: Whether sync consults the metadata cache
        dry_run: Only report what sync would do

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logger = logging.getLogger(__name__)

    if command not in COMMANDS:
        logger.error(f"unsupport command: {command}")
        return EXIT_CONFIG_ERROR

    server_url = url or config_mgr.get("server_url")
    server_port = port or config_mgr.get("server_port")
    logger.debug(f"port number: {server_port}")

    api_client = TreeMirrorAPI(
        server_url,
        server_port,
        verify_ssl=config_mgr.get("verify_ssl", False),
        timeout=config_mgr.get("request_timeout", 30),
        download_timeout=config_mgr.get("download_timeout", 300)
    )

    cache = None
    try:
        if command == "dir":
            for line in format_directory(api_client.get_directory()):
                print(line)
            return EXIT_SUCCESS

        if command == "files":
            for remote in api_client.list_files(pattern):
                print(f"{remote.path}(size={remote.size}){' [DELETED]' if remote.deleted else ''}")
            return EXIT_SUCCESS

        local_root = Path(dest or config_mgr.get("local_root", "."))
        if use_cache is None:
            use_cache = config_mgr.get("use_cache", True)
        if use_cache and not dry_run:
            cache = open_metadata_cache(config_mgr.get_cache_path(local_root))

        sync_ops = SyncOperations(api_client, local_root, cache=cache,
                                  chunk_size=config_mgr.get("chunk_size", 65536))

        def cli_progress_callback(message: str, current: int, total: int):
            if total > 0:
                print(f"{message} {current}/{total}", end='\r', flush=True)

        report = sync_ops.sync(pattern, cli_progress_callback, dry_run=dry_run)

        if dry_run:
            for outcome in report.outcomes:
                print(f"{outcome.decision.value:<12} {outcome.remote.path}")

        print(report.summary())
        if not report.ok:
            for path in failed_paths(report):
                print(f"FAILED: {path}", file=sys.stderr)
            return EXIT_FAILURE
        return EXIT_SUCCESS

    except TreeMirrorAPIError as e:
        logger.error(f"HTTP error: {e}")
        return EXIT_FAILURE

    finally:
        if cache is not None:
            cache.close()
        api_client.close()
