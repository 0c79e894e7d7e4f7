"""
TreeMirror Client - Main Entry Point

Parses command-line arguments, loads configuration and runs a CLI command.
"""

import sys
import logging
import argparse

from treemirror_client.cli import COMMANDS, EXIT_FAILURE, cleanup_old_logs, run_cli_command, setup_cli_logging
from treemirror_client.managers import ConfigManager


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='TreeMirror - file synchronize client'
    )
    parser.add_argument('url', nargs='?', default=None,
                        help='Server URL or host (default: server_url from config)')
    parser.add_argument('command', nargs='?', default='dir', choices=COMMANDS,
                        help='Command to run: dir, files or sync (default: dir)')
    parser.add_argument('pattern', nargs='?', default='',
                        help='Catalog path prefix to list or sync')
    parser.add_argument('-p', '--port', type=int, help='Port number (default: server_port from config)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose mode')
    parser.add_argument('--dest', help='Local directory receiving synced files (default: local_root from config)')
    parser.add_argument('--no-cache', action='store_true', help='Compare against local files only')
    parser.add_argument('--dry-run', action='store_true', help='Show sync decisions without changing anything')
    return parser


def main(argv=None) -> int:
    """
    Main entry point for TreeMirror client.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = build_argument_parser().parse_args(argv)

    config_mgr = ConfigManager()
    try:
        config_mgr.load_config()
    except OSError as e:
        print(f"Cannot load configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    log_file = setup_cli_logging(config_mgr, args.verbose)
    cleanup_old_logs(config_mgr, log_file)

    try:
        return run_cli_command(
            args.command,
            config_mgr,
            url=args.url,
            port=args.port,
            pattern=args.pattern,
            dest=args.dest,
            use_cache=False if args.no_cache else None,
            dry_run=args.dry_run
        )
    except KeyboardInterrupt:
        logging.getLogger(__name__).warning("Operation cancelled by user (Ctrl+C)")
        return EXIT_FAILURE


if __name__ == '__main__':
    sys.exit(main())
