"""Tests for module version ordering."""

import pytest

from module_update_checker.core.errors import VersionParseError
from module_update_checker.core.versioning import is_newer, parse_version


class TestIsNewer:
    def test_major_bump(self):
        assert is_newer("2.0.0", "1.9.9") is True

    def test_equal_versions(self):
        assert is_newer("1.0.0", "1.0.0") is False

    def test_older_candidate(self):
        assert is_newer("1.0.0", "1.2.0") is False

    def test_numeric_not_lexical(self):
        assert is_newer("1.10.0", "1.9.0") is True

    def test_prerelease_below_release(self):
        assert is_newer("1.0.0-beta", "1.0.0") is False
        assert is_newer("1.0.0", "1.0.0-beta") is True

    def test_four_part_versions(self):
        assert is_newer("5.1.0.1", "5.1.0") is True
        assert is_newer("5.1.0.0", "5.1.0") is False


class TestParseVersion:
    def test_preview_label(self):
        assert parse_version("7.4.0-preview2") < parse_version("7.4.0")

    def test_unknown_label_sorts_below_named_prereleases(self):
        assert parse_version("2.0.0-nightly") < parse_version("2.0.0-alpha1")
        assert parse_version("2.0.0-nightly") > parse_version("1.9.9")

    @pytest.mark.parametrize("label", ["1.0.0-1", "1.0.0-r1", "1.0.0-rev2", "1.0.0-post1"])
    def test_dash_suffix_is_always_prerelease(self, label):
        assert parse_version(label).is_prerelease
        assert parse_version(label) < parse_version("1.0.0")
        assert is_newer(label, "1.0.0") is False
        assert is_newer("1.0.0", label) is True

    def test_dash_suffix_still_above_previous_release(self):
        assert is_newer("1.0.0-1", "0.9.9") is True

    def test_build_metadata_is_not_a_label(self):
        assert parse_version("1.0.0+build-7").is_prerelease is False

    def test_whitespace_ignored(self):
        assert parse_version(" 1.2.3 ") == parse_version("1.2.3")

    def test_garbage_raises(self):
        with pytest.raises(VersionParseError):
            parse_version("not-a-version")
