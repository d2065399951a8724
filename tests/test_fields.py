import pytest

from spiderling.fields import (
    format_field,
    get_value_for_field,
    store_fields,
    validate_field_names,
)
from spiderling.result import Result

URL = "https://policies.google.com/terms/file.php?hl=en-IN&fg=1"


def test_validate_field_names():
    validate_field_names("fqdn")
    with pytest.raises(ValueError):
        validate_field_names("")
    with pytest.raises(ValueError):
        validate_field_names("invalid")
    with pytest.raises(ValueError, match="bogus"):
        validate_field_names("url,bogus")


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        ("url", [URL]),
        ("path", ["/terms/file.php"]),
        ("fqdn", ["policies.google.com"]),
        ("rdn", ["google.com"]),
        ("rurl", ["https://policies.google.com"]),
        ("file", ["file.php"]),
        ("key", ["hl", "fg"]),
        ("kv", ["hl=en-IN", "fg=1"]),
        ("value", ["en-IN", "1"]),
        ("dir", ["/terms/"]),
        ("udir", ["https://policies.google.com/terms/"]),
    ],
)
def test_format_field(fields, expected):
    result = format_field(Result(url=URL), fields)
    assert sorted(result.split("\n")) == sorted(expected)


def test_format_field_template_with_several_fields():
    assert format_field(Result(url=URL), "fqdn|dir") == "policies.google.com|/terms/"


def test_format_field_without_replacement_is_blank():
    assert format_field(Result(url="https://policies.google.com/"), "file") == ""


def test_format_field_qpath_sorts_query():
    assert format_field(Result(url=URL), "qpath") == "/terms/file.php?fg=1&hl=en-IN"


def test_get_value_for_field():
    result = Result(url=URL)
    assert get_value_for_field(result, "qurl") == URL
    assert get_value_for_field(result, "qpath") == "/terms/file.php?fg=1&hl=en-IN"
    assert get_value_for_field(result, "udir") == "https://policies.google.com/terms/"
    assert sorted(get_value_for_field(result, "kv").split("\n")) == ["fg=1", "hl=en-IN"]
    assert get_value_for_field(result, "unknown") == ""


def test_get_value_for_field_without_query():
    result = Result(url="https://policies.google.com/terms")
    assert get_value_for_field(result, "qurl") == ""
    assert get_value_for_field(result, "dir") == ""


def test_store_fields_appends_per_host(tmp_path):
    store_fields(Result(url=URL), ["fqdn", "file"], tmp_path)
    store_fields(Result(url=URL), ["fqdn"], tmp_path)
    fqdn_file = tmp_path / "https_policies.google.com_fqdn.txt"
    assert fqdn_file.read_text() == "policies.google.com\npolicies.google.com\n"
    assert (tmp_path / "https_policies.google.com_file.txt").read_text() == "file.php\n"


def test_store_fields_skips_empty_values(tmp_path):
    store_fields(Result(url="https://policies.google.com/"), ["file"], tmp_path)
    assert list(tmp_path.iterdir()) == []