import json
from pathlib import Path

import pytest

from spiderling.navigation import HttpRequest, HttpResponse
from spiderling.responses import INDEX_FILE, format_response, response_hash
from spiderling.result import Result
from spiderling.writer import FileWriter, StandardWriter


@pytest.fixture(autouse=True)
def _in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def _response(url="https://example.com/page"):
    return HttpResponse(
        status_code=200,
        status="200 OK",
        body=b"test body",
        request=HttpRequest(method="GET", url=url, host="example.com"),
    )


def test_file_writer_writes_lines(tmp_path):
    path = tmp_path / "out.txt"
    with FileWriter(path) as writer:
        writer.write(b"first")
        writer.write("second")
    assert path.read_text() == "first\nsecond\n"


def test_format_screen_plain():
    writer = StandardWriter()
    assert writer.format_screen(Result(url="https://example.com/a", tag="a")) == b"https://example.com/a"


def test_format_screen_verbose_without_colors():
    writer = StandardWriter(verbose=True)
    result = Result(url="https://example.com/a", tag="form", method="POST", body="x=1")
    assert writer.format_screen(result) == b"[form] [POST] https://example.com/a [x=1]"


def test_format_screen_verbose_with_colors():
    writer = StandardWriter(colors=True, verbose=True)
    data = writer.format_screen(Result(url="https://example.com/a", tag="a"))
    assert data == b"[\x1b[34ma\x1b[0m] https://example.com/a"


def test_format_screen_fields():
    writer = StandardWriter(fields="fqdn")
    assert writer.format_screen(Result(url="https://example.com/a")) == b"example.com"


def test_format_json_round_trip():
    writer = StandardWriter(json=True)
    decoded = json.loads(writer.format_json(Result(url="https://example.com/a", tag="a")))
    assert decoded["endpoint"] == "https://example.com/a"
    assert decoded["tag"] == "a"


@pytest.mark.parametrize("kwargs", [{"fields": "invalid"}, {"store_fields": "invalid"}])
def test_invalid_fields_rejected(kwargs):
    with pytest.raises(ValueError, match="could not validate"):
        StandardWriter(**kwargs)


def test_write_prints_and_decolorizes_file(tmp_path, capsys):
    path = tmp_path / "out.txt"
    writer = StandardWriter(colors=True, verbose=True, file=str(path))
    writer.write(Result(url="https://example.com/a", tag="a"), None)
    writer.close()
    assert "\x1b[34m" in capsys.readouterr().out
    assert path.read_text() == "[a] https://example.com/a\n"


def test_write_json_to_file(tmp_path):
    path = tmp_path / "out.jsonl"
    with StandardWriter(json=True, file=str(path)) as writer:
        writer.write(Result(url="https://example.com/a"), None)
    line = path.read_text().splitlines()[0]
    assert json.loads(line)["endpoint"] == "https://example.com/a"


def test_write_nothing_for_empty_format(capsys):
    writer = StandardWriter(fields="qurl")
    writer.write(Result(url="https://example.com/a"), None)
    assert capsys.readouterr().out == ""


def test_store_fields_files(tmp_path):
    writer = StandardWriter(store_fields="fqdn")
    writer.write(Result(url="https://example.com/a"), None)
    stored = tmp_path / writer.store_fields_directory / "https_example.com_fqdn.txt"
    assert stored.read_text() == "example.com\n"


def test_store_response(tmp_path):
    directory = tmp_path / "stored"
    writer = StandardWriter(store_response=True, store_response_dir=str(directory))
    assert (directory / INDEX_FILE).read_text() == ""
    resp = _response()
    writer.write(None, resp)
    stored = directory / "example.com" / f"{response_hash(resp.request.url)}.txt"
    assert stored.read_bytes() == format_response(resp) + b"\n"
    index = (directory / INDEX_FILE).read_text()
    assert index == f"{stored} {resp.request.url} (200 OK)\n"


def test_store_response_default_dir_is_recreated():
    writer = StandardWriter(store_response=True)
    directory = Path(writer.store_response_dir)
    (directory / "old.txt").write_text("stale")
    StandardWriter(store_response=True)
    assert not (directory / "old.txt").exists()
    assert (directory / INDEX_FILE).exists()