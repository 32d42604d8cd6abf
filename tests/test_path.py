"""
Tests for Drive URL resolution and filename sanitization.

Run with: pytest tests/test_path.py -v
"""

import pytest

from gdrive_dl.utils.path import (
    MAX_FILENAME_LENGTH,
    ResourceKind,
    classify_entry_url,
    classify_url,
    create_dir,
    sanitize,
    url_to_id,
)

UNSAFE_CHARACTERS = set('\\/:*?"<>|\0')

SAMPLE_NAMES = [
    "Quarterly Report.pdf",
    'a<b>c:d"e/f\\g|h?i*j',
    "name\x01\x1f.txt",
    "file%20name.txt",
    "%2541",
    "a%2/5",
    "trailing.. ",
    " . ",
    "...",
    "",
    "con",
    "LPT1",
    "com9",
    "x" * 300 + ".tar.gz",
    "y" * 400,
    "." + "z" * 300,
    "Résumé – final (2).docx",
]


# ============ URL RESOLUTION ============


class TestUrlToId:
    """Tests for extracting identifiers from links and bare IDs."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://host/file/d/ABCDEFGHIJ1234/view", "ABCDEFGHIJ1234"),
            ("https://host/folders/XYZ0123456", "XYZ0123456"),
            ("https://drive.google.com/open?id=0B1a2b3c4d5e6f&usp=sharing", "0B1a2b3c4d5e6f"),
            ("https://drive.google.com/uc?id=1abcDEF_ghi-JK&export=download", "1abcDEF_ghi-JK"),
            ("1abcDEF_ghi-JKlmn", "1abcDEF_ghi-JKlmn"),
            ("https://drive.google.com/drive/u/0/folders/1FolderIdAbc", "1FolderIdAbc"),
        ],
    )
    def test_extracts_id(self, url, expected):
        assert url_to_id(url) == expected

    def test_structured_form_wins_over_longer_bare_token(self):
        url = "https://example-averyveryverylonghost.com/file/d/ABCDEFGHIJ1234/view"
        assert url_to_id(url) == "ABCDEFGHIJ1234"

    def test_short_ids_are_not_accepted(self):
        assert url_to_id("https://host/file/d/short/view") is None

    def test_no_id(self):
        assert url_to_id("not a url and too short") is None
        assert url_to_id("") is None


class TestClassifyUrl:
    """Tests for routing resolved URLs to the file or folder path."""

    def test_file_urls(self):
        assert classify_url("https://drive.google.com/file/d/X/view") is ResourceKind.FILE
        assert classify_url("https://drive.google.com/uc?id=X") is ResourceKind.FILE

    def test_folder_urls(self):
        assert (
            classify_url("https://drive.google.com/drive/folders/X")
            is ResourceKind.FOLDER
        )

    def test_case_insensitive(self):
        assert classify_url("https://drive.google.com/FILE/d/X") is ResourceKind.FILE

    def test_listing_entries_follow_view_links_only(self):
        assert classify_entry_url("https://drive.google.com/file/d/X/view") is ResourceKind.FILE
        assert (
            classify_entry_url("https://drive.google.com/drive/folders/X")
            is ResourceKind.FOLDER
        )
        assert classify_entry_url("https://drive.google.com/uc?id=X") is None

    def test_other_urls(self):
        assert classify_url("https://docs.google.com/document/d/X/edit") is None


# ============ SANITIZATION ============


class TestSanitize:
    """Tests for turning display names into safe filesystem names."""

    def test_removes_unsafe_characters(self):
        assert sanitize('a<b>c:d"e/f\\g|h?i*j') == "abcdefghij"

    def test_removes_control_characters(self):
        assert sanitize("name\x01\x1f.txt") == "name.txt"

    def test_percent_decodes(self):
        assert sanitize("file%20name.txt") == "file name.txt"

    def test_trims_trailing_dots_and_spaces(self):
        assert sanitize("  report.. ") == "report"

    def test_dot_only_and_empty_names(self):
        assert sanitize("...") == "_"
        assert sanitize("") == "_"
        assert sanitize(" . ") == "_"

    @pytest.mark.parametrize("name", ["con", "CON", "Prn", "aux", "NUL", "COM1", "lpt9"])
    def test_prefixes_reserved_names(self, name):
        assert sanitize(name) == "_" + name

    def test_reserved_stem_with_extension_is_kept(self):
        assert sanitize("CON.txt") == "CON.txt"

    def test_caps_length_keeping_extension(self):
        result = sanitize("a" * 300 + ".txt")
        assert len(result) == MAX_FILENAME_LENGTH
        assert result.endswith(".txt")

    def test_caps_length_without_extension(self):
        assert sanitize("b" * 300) == "b" * MAX_FILENAME_LENGTH

    def test_preserves_valid_names(self):
        assert sanitize("valid_file-name (1).pdf") == "valid_file-name (1).pdf"

    @pytest.mark.parametrize("name", SAMPLE_NAMES)
    def test_output_is_safe(self, name):
        result = sanitize(name)
        assert result
        assert len(result) <= MAX_FILENAME_LENGTH
        assert not UNSAFE_CHARACTERS & set(result)
        assert all(ord(c) > 31 for c in result)
        assert not result.endswith((".", " "))
        assert result.upper() not in {"CON", "PRN", "AUX", "NUL", "COM1", "LPT1"}

    @pytest.mark.parametrize("name", SAMPLE_NAMES)
    def test_idempotent(self, name):
        once = sanitize(name)
        assert sanitize(once) == once


class TestCreateDir:
    def test_creates_nested_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"
        create_dir(target)
        assert target.is_dir()

    def test_existing_directory_is_fine(self, tmp_path):
        create_dir(tmp_path)
        assert tmp_path.is_dir()
