"""
Tests for the TreeMirror Client CLI commands

TreeMirrorAPI is patched so commands run without a server.
"""

import os
from unittest.mock import patch

import pytest

from treemirror_client import cli
from treemirror_client.client import build_argument_parser
from treemirror_client.exceptions import TreeMirrorServerError, TreeMirrorTransferError
from treemirror_client.managers import ConfigManager
from treemirror_client.models import RemoteDirectory, RemoteFile


@pytest.fixture
def config_mgr(tmp_path):
    manager = ConfigManager(tmp_path / "config.json")
    manager.load_config()
    return manager


@pytest.fixture
def mock_api():
    with patch.object(cli, "TreeMirrorAPI") as api_class:
        yield api_class.return_value


def test_format_directory():
    tree = RemoteDirectory("share", 2, [
        RemoteDirectory("docs", 1, [RemoteDirectory("old", 0)]),
        RemoteDirectory("img", 3),
    ])

    assert cli.format_directory(tree) == [
        ":share[share] (2 files)",
        " :docs[share/docs] (1 files)",
        "  :old[share/docs/old] (0 files)",
        " :img[share/img] (3 files)",
    ]


def test_dir_command(config_mgr, mock_api, capsys):
    mock_api.get_directory.return_value = RemoteDirectory("share", 1)

    assert cli.run_cli_command("dir", config_mgr, url="nas.local", port=9000) == cli.EXIT_SUCCESS

    assert capsys.readouterr().out.splitlines() == [":share[share] (1 files)"]
    mock_api.close.assert_called_once()


def test_files_command(config_mgr, mock_api, capsys):
    mock_api.list_files.return_value = [
        RemoteFile(path="docs/a.md", size=3, modified_at=1000),
        RemoteFile(path="docs/b.md", size=0, modified_at=0, deleted=True),
    ]

    assert cli.run_cli_command("files", config_mgr, pattern="docs/") == cli.EXIT_SUCCESS

    mock_api.list_files.assert_called_once_with("docs/")
    assert capsys.readouterr().out.splitlines() == [
        "docs/a.md(size=3)",
        "docs/b.md(size=0) [DELETED]",
    ]


def test_unknown_command(config_mgr, mock_api):
    assert cli.run_cli_command("upload", config_mgr) == cli.EXIT_CONFIG_ERROR


def test_server_error(config_mgr, mock_api):
    mock_api.list_files.side_effect = TreeMirrorServerError("Cannot connect to server")

    assert cli.run_cli_command("sync", config_mgr, dest="unused", use_cache=False) == cli.EXIT_FAILURE
    mock_api.close.assert_called_once()


def test_sync_command(config_mgr, mock_api, tmp_path, capsys):
    """Test sync downloads into the destination and records the cache"""
    dest = tmp_path / "mirror"
    mock_api.list_files.return_value = [RemoteFile(path="a/b.txt", size=2, modified_at=1000)]
    mock_api.iter_file_chunks.side_effect = lambda path, chunk_size: iter([(b"hi", 2, 2)])

    assert cli.run_cli_command("sync", config_mgr, dest=str(dest)) == cli.EXIT_SUCCESS

    assert (dest / "a" / "b.txt").read_bytes() == b"hi"
    assert (dest / ".treemirror" / "cache.db").exists()
    mock_api.list_files.assert_called_once_with("", update=True)
    assert "1 downloaded, 0 unchanged, 0 deleted, 0 failed" in capsys.readouterr().out


def test_sync_command_reports_failures(config_mgr, mock_api, tmp_path, capsys):
    def broken_download(path, chunk_size):
        raise TreeMirrorTransferError(f"Download of {path} failed with status 404")
        yield

    mock_api.list_files.return_value = [RemoteFile(path="lost.txt", size=2, modified_at=1000)]
    mock_api.iter_file_chunks.side_effect = broken_download

    result = cli.run_cli_command("sync", config_mgr, dest=str(tmp_path), use_cache=False)

    assert result == cli.EXIT_FAILURE
    assert "FAILED: lost.txt" in capsys.readouterr().err
    assert not (tmp_path / "lost.txt").exists()


def test_sync_dry_run(config_mgr, mock_api, tmp_path, capsys):
    mock_api.list_files.return_value = [RemoteFile(path="new.txt", size=2, modified_at=1000)]

    assert cli.run_cli_command("sync", config_mgr, dest=str(tmp_path), dry_run=True) == cli.EXIT_SUCCESS

    assert "download" in capsys.readouterr().out
    mock_api.iter_file_chunks.assert_not_called()
    assert not (tmp_path / ".treemirror").exists()


def test_cleanup_old_logs(config_mgr, tmp_path):
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    current = log_dir / "treemirror-2026-01-02-00-00-00.log"
    stale = log_dir / "treemirror-2020-01-01-00-00-00.log"
    recent = log_dir / "treemirror-2026-01-01-00-00-00.log"
    unrelated = log_dir / "other.log"
    for log_file in (current, stale, recent, unrelated):
        log_file.write_text("log")
    old_time = 86400 * 365
    os.utime(stale, (old_time, old_time))
    os.utime(unrelated, (old_time, old_time))

    cli.cleanup_old_logs(config_mgr, current)

    assert current.exists()
    assert recent.exists()
    assert unrelated.exists()
    assert not stale.exists()


def test_argument_parser():
    args = build_argument_parser().parse_args(["nas.local", "sync", "docs/", "-p", "9000", "--no-cache"])

    assert args.url == "nas.local"
    assert args.command == "sync"
    assert args.pattern == "docs/"
    assert args.port == 9000
    assert args.no_cache

    defaults = build_argument_parser().parse_args([])
    assert defaults.command == "dir"
    assert defaults.url is None
