"""Tests for feed parsing and entry normalisation."""

from __future__ import annotations

from datetime import datetime, timezone

from scout.db.models import VIDEO_ID_MAX_LENGTH
from scout.services.feed_parser import entries_from_feed, normalise_entries, parse_feed, video_identity
from scout.tests.feeds import atom_entry, atom_feed


def test_normalise_entries_wraps_single_mapping():
    entry = {"yt_videoid": "abc123", "title": "Hello"}
    assert normalise_entries(entry) == [entry]


def test_normalise_entries_keeps_list_order():
    entries = [{"id": "a"}, {"id": "b"}]
    assert normalise_entries(entries) == entries
    assert normalise_entries(tuple(entries)) == entries


def test_normalise_entries_treats_missing_or_odd_values_as_empty():
    assert normalise_entries(None) == []
    assert normalise_entries("not-a-collection") == []


def test_single_and_list_shapes_produce_same_entries():
    entry = {"yt_videoid": "abc123", "title": "Hello"}
    assert entries_from_feed(entry) == entries_from_feed([entry])


def test_video_identity_strips_youtube_prefix():
    assert video_identity({"id": "yt:video:XYZ", "title": "T"}) == ("XYZ", "T")
    assert video_identity({"yt_videoid": "ABC"}) == ("ABC", "")


def test_parse_feed_single_entry():
    body = atom_feed(atom_entry("abc123", "Hello", "2024-01-01T00:00:00Z"))

    entries = parse_feed(body)

    assert len(entries) == 1
    assert entries[0].video_id == "abc123"
    assert entries[0].title == "Hello"
    assert entries[0].published_at == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_parse_feed_keeps_feed_order():
    body = atom_feed(
        atom_entry("new", "Newest", "2024-03-01T00:00:00Z"),
        atom_entry("mid", "Middle", "2024-02-01T00:00:00Z"),
        atom_entry("old", "Oldest", "2024-01-01T00:00:00Z"),
    )

    assert [entry.video_id for entry in parse_feed(body)] == ["new", "mid", "old"]


def test_parse_feed_without_published_leaves_timestamp_empty():
    entries = parse_feed(atom_feed(atom_entry("abc123", "Hello")))
    assert entries[0].published_at is None


def test_parse_feed_without_entries():
    assert parse_feed(atom_feed()) == []


def test_parse_feed_tolerates_garbage():
    assert parse_feed(b"<html><body>rate limited") == []
    assert parse_feed(b"") == []


def test_over_long_ids_are_skipped():
    long_id = "x" * (VIDEO_ID_MAX_LENGTH + 1)
    entries = entries_from_feed([{"id": long_id, "title": "Too long"}, {"id": "ok", "title": "Fine"}])
    assert [entry.video_id for entry in entries] == ["ok"]
