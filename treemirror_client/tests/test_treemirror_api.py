"""
Tests for the TreeMirror Client API module

The requests session is replaced with a mock so no server is needed.
"""

from unittest.mock import MagicMock

import pytest
import requests

from treemirror_client.api import TreeMirrorAPI
from treemirror_client.exceptions import (
    TreeMirrorParseError,
    TreeMirrorServerError,
    TreeMirrorTransferError
)
from treemirror_client.models import RemoteFile


def make_response(status_code=200, json_body=None, chunks=(), headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_body
    response.headers = headers or {}
    response.iter_content.return_value = list(chunks)
    response.__enter__.return_value = response
    return response


@pytest.fixture
def api():
    client = TreeMirrorAPI("nas.local", 8000, verify_ssl=False)
    client.session = MagicMock()
    yield client
    client.close()


def test_base_url():
    assert TreeMirrorAPI("nas.local", 8000).base_url == "http://nas.local:8000"
    assert TreeMirrorAPI("https://nas.local/", 8443).base_url == "https://nas.local:8443"


def test_file_url_quotes_path(api):
    assert api.file_url("docs/my file.txt") == "http://nas.local:8000/files/docs/my%20file.txt"


def test_list_files(api):
    api.session.get.return_value = make_response(json_body={"Files": [
        {"Path": "docs/a.md", "Size": 3, "Time": 1000, "Delete": False},
    ]})

    files = api.list_files("docs/")

    assert files == [RemoteFile(path="docs/a.md", size=3, modified_at=1000)]
    args, kwargs = api.session.get.call_args
    assert args[0] == "http://nas.local:8000/list"
    assert kwargs["params"] == {"prefix": "docs/"}
    assert kwargs["verify"] is False


def test_list_files_with_update(api):
    api.session.get.return_value = make_response(json_body={"Files": None})

    assert api.list_files(update=True) == []
    assert api.session.get.call_args.kwargs["params"] == {"prefix": "", "update": "true"}


def test_get_directory(api):
    api.session.get.return_value = make_response(json_body={"Dir": {"Name": "share", "Count": 1}})

    tree = api.get_directory()

    assert tree.name == "share"
    assert tree.file_count == 1
    assert tree.children == []


@pytest.mark.parametrize("error", [
    requests.exceptions.ConnectionError("refused"),
    requests.exceptions.Timeout("slow"),
    requests.exceptions.RequestException("other"),
])
def test_request_failure(api, error):
    api.session.get.side_effect = error

    with pytest.raises(TreeMirrorServerError):
        api.list_files()


def test_error_status(api):
    api.session.get.return_value = make_response(status_code=500)

    with pytest.raises(TreeMirrorServerError, match="500"):
        api.get_directory()


def test_invalid_json(api):
    response = make_response()
    response.json.side_effect = ValueError("Expecting value")
    api.session.get.return_value = response

    with pytest.raises(TreeMirrorParseError):
        api.list_files()


def test_malformed_listing(api):
    api.session.get.return_value = make_response(json_body={"Files": [{"Path": "a.txt"}]})

    with pytest.raises(TreeMirrorParseError):
        api.list_files()


def test_iter_file_chunks(api):
    api.session.get.return_value = make_response(
        chunks=[b"abc", b"", b"def"], headers={"Content-Length": "6"}
    )

    chunks = list(api.iter_file_chunks("docs/a.md", chunk_size=3))

    assert chunks == [(b"abc", 3, 6), (b"def", 6, 6)]
    args, kwargs = api.session.get.call_args
    assert args[0] == "http://nas.local:8000/files/docs/a.md"
    assert kwargs["stream"] is True
    assert api.session.get.return_value.iter_content.call_args.kwargs["chunk_size"] == 3


def test_iter_file_chunks_without_length(api):
    api.session.get.return_value = make_response(chunks=[b"abc"])

    assert list(api.iter_file_chunks("a.txt")) == [(b"abc", 3, None)]


def test_iter_file_chunks_not_found(api):
    api.session.get.return_value = make_response(status_code=404)

    with pytest.raises(TreeMirrorTransferError, match="404"):
        list(api.iter_file_chunks("gone.txt"))


def test_iter_file_chunks_truncated(api):
    """Test a body shorter than its Content-Length is a failed transfer"""
    api.session.get.return_value = make_response(chunks=[b"abc"], headers={"Content-Length": "10"})

    with pytest.raises(TreeMirrorTransferError, match="incomplete"):
        list(api.iter_file_chunks("a.txt"))


def test_iter_file_chunks_connection_drop(api):
    response = make_response(headers={"Content-Length": "6"})
    response.iter_content.side_effect = requests.exceptions.ChunkedEncodingError("reset")
    api.session.get.return_value = response

    with pytest.raises(TreeMirrorTransferError):
        list(api.iter_file_chunks("a.txt"))
