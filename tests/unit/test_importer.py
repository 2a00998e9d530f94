"""Tests for bulk import of plaintext credential feeds."""

import os

import pytest

from sitevault.crypto import decrypt
from sitevault.importer import (
    FeedImportError,
    MalformedLineError,
    import_feed,
    import_file,
)
from sitevault.storage import StorageError


class TestImportFeed:
    def test_two_users_one_site(self, master_key):
        feed = "site1 userA nameA pwA\nsite1 userB nameB pwB\n"
        store = import_feed(feed.splitlines(), master_key)

        assert list(store.sites) == ["site1"]
        assert set(store.sites["site1"]) == {"userA", "userB"}
        assert store.get("site1", "userA", master_key).password == "pwA"
        assert store.get("site1", "userB", master_key).password == "pwB"
        assert store.get("site1", "userB", master_key).username == "nameB"

    def test_accepts_lines_with_newlines(self, master_key):
        lines = ["a b c d\n", "e f g h\n"]
        store = import_feed(lines, master_key)
        assert len(store) == 2
        assert store.get("a", "b", master_key).password == "d"

    def test_tabs_and_repeated_spaces(self, master_key):
        store = import_feed(["site\tuser   name \t pw"], master_key)
        assert store.get("site", "user", master_key).username == "name"

    def test_last_write_wins(self, master_key):
        feed = ["s u first pw1", "s u second pw2"]
        store = import_feed(feed, master_key)
        view = store.get("s", "u", master_key)
        assert (view.username, view.password) == ("second", "pw2")
        assert len(store) == 1

    def test_each_password_has_own_nonce(self, master_key):
        store = import_feed(["s u1 n same", "s u2 n same"], master_key)
        envelopes = [c.password for _, _, c in store.list()]
        assert envelopes[0] != envelopes[1]
        assert all(decrypt(e, master_key) == "same" for e in envelopes)

    def test_blank_line_is_malformed(self, master_key):
        with pytest.raises(MalformedLineError) as exc:
            import_feed(["s u n p", "", "s2 u n p"], master_key)
        assert (exc.value.line_number, exc.value.field_count) == (2, 0)

    def test_whitespace_only_line_is_malformed(self, master_key):
        with pytest.raises(MalformedLineError) as exc:
            import_feed(["   \t"], master_key)
        assert exc.value.field_count == 0

    def test_whole_feed_string(self, master_key):
        feed = "site1 userA nameA pwA\nsite1 userB nameB pwB\n"
        store = import_feed(feed, master_key)
        assert len(store) == 2
        assert store.get("site1", "userB", master_key).password == "pwB"

    def test_empty_feed(self, master_key):
        assert len(import_feed([], master_key)) == 0

    def test_too_few_fields(self, master_key):
        with pytest.raises(MalformedLineError) as exc:
            import_feed(["s u n p", "s u n"], master_key)
        assert exc.value.line_number == 2
        assert exc.value.field_count == 3
        assert "Line 2" in str(exc.value)

    def test_too_many_fields(self, master_key):
        with pytest.raises(MalformedLineError) as exc:
            import_feed(["s u n pass word"], master_key)
        assert exc.value.line_number == 1

    def test_error_does_not_echo_line(self, master_key):
        with pytest.raises(FeedImportError) as exc:
            import_feed(["site user topsecret"], master_key)
        assert "topsecret" not in str(exc.value)

    def test_line_numbers_are_one_based(self, master_key):
        with pytest.raises(MalformedLineError) as exc:
            import_feed(["s u n p", "s2 u n p", "s3 u n p", "bad"], master_key)
        assert exc.value.line_number == 4


class TestImportFile:
    def test_reads_file(self, temp_dir, master_key):
        path = os.path.join(temp_dir, "raw.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write("site1 userA nameA pwA\nsite2 userB nameB pwB\n")

        store = import_file(path, master_key)
        assert store.site_names() == ["site1", "site2"]

    def test_missing_file(self, temp_dir, master_key):
        with pytest.raises(StorageError):
            import_file(os.path.join(temp_dir, "missing.txt"), master_key)

    def test_blank_line_in_file(self, temp_dir, master_key):
        path = os.path.join(temp_dir, "raw.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write("site1 userA nameA pwA\n\nsite2 userB nameB pwB\n")

        with pytest.raises(MalformedLineError) as exc:
            import_file(path, master_key)
        assert exc.value.line_number == 2
