"""Tests for composite key handling."""

import pytest

from contentdesk import keys


def test_format_and_parse():
    key = keys.format_composite_key("NEWS", "2025-05-28", "0001")
    assert key == "NEWS#2025-05-28#0001"
    parsed = keys.parse_composite_key(key)
    assert parsed.prefix == "NEWS"
    assert parsed.parts == ("2025-05-28", "0001")
    assert str(parsed) == key


def test_parse_rejects_malformed():
    for bad in ["", "NEWS", "#x", "NEWS#", "NEWS##1"]:
        with pytest.raises(ValueError):
            keys.parse_composite_key(bad)


def test_parse_checks_prefix():
    with pytest.raises(ValueError):
        keys.parse_composite_key("PLAYLIST#abc", expected_prefix="NEWS")


def test_format_rejects_delimiter_in_part():
    with pytest.raises(ValueError):
        keys.format_composite_key("NEWS", "a#b")


def test_article_keys():
    pk, sk = keys.article_keys("2025-05-28-0001")
    assert pk == "NEWS#2025-05-28#0001"
    assert sk == "ARTICLE#0001"


def test_article_keys_malformed():
    for bad in ["", "2025-05-28", "latest", "25-05-28-0001"]:
        with pytest.raises(ValueError):
            keys.article_keys(bad)


def test_article_id_from_pk():
    assert keys.article_id_from_pk("NEWS#2025-05-28#0001") == "2025-05-28-0001"
    with pytest.raises(ValueError):
        keys.article_id_from_pk("NEWS#2025-05-28")


def test_playlist_id_from_pk():
    assert keys.playlist_id_from_pk("PLAYLIST#PLabc123") == "PLabc123"
