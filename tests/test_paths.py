"""
test_paths.py — Folder walk order and file name conventions.
"""

import pytest

from endpoint_discovery import FileSystemError, HttpVerb, PathScanner, classify_file, is_legal_http_name, new_stats

from .conftest import write_files


# ── is_legal_http_name ─────────────────────────────────────────────────────────


class TestIsLegalHttpName:
    def test_lowercase_digits_and_separators(self):
        """Lowercase letters, digits, '-', '_' and '/' are legal."""
        assert is_legal_http_name("modules/my-module_2/v1")

    def test_dot_is_illegal(self):
        """Hidden folders (leading '.') are not legal route segments."""
        assert not is_legal_http_name("modules/.git")

    def test_uppercase_and_spaces_are_illegal(self):
        assert not is_legal_http_name("modules/Users")
        assert not is_legal_http_name("modules/my folder")


# ── classify_file ──────────────────────────────────────────────────────────────


class TestClassifyFile:
    @pytest.mark.parametrize("verb", ["get", "post", "put", "delete"])
    def test_supported_verbs(self, verb):
        """Every supported verb yields (route, verb)."""
        assert classify_file(f"modules/foo/bar.{verb}.hl") == ("modules/foo/bar", HttpVerb(verb))

    def test_unsupported_verb_is_excluded(self):
        assert classify_file("modules/foo/bar.patch.hl") is None

    def test_uppercase_verb_is_excluded(self):
        assert classify_file("modules/foo/bar.GET.hl") is None

    def test_wrong_segment_count_is_excluded(self):
        """Names must split into exactly route, verb and extension."""
        assert classify_file("modules/foo/bar.hl") is None
        assert classify_file("modules/foo/bar.baz.get.hl") is None

    def test_backslashes_are_normalized(self):
        assert classify_file("modules\\foo\\bar.get.hl") == ("modules/foo/bar", HttpVerb.GET)


# ── PathScanner ────────────────────────────────────────────────────────────────


class TestPathScanner:
    def test_files_before_subfolders_sorted_at_every_level(self, tmp_path):
        """Pre-order walk: a folder's files come before its subfolders' files."""
        write_files(tmp_path, {
            "modules/b/z.get.hl": "",
            "modules/b/a.get.hl": "",
            "modules/b/inner/c.get.hl": "",
            "modules/a/y.get.hl": "",
            "modules/a/sub/x.get.hl": "",
            "modules/c/w.get.hl": "",
        })
        files = list(PathScanner(str(tmp_path)).walk())
        assert [f.relative for f in files] == [
            "modules/a/y.get.hl",
            "modules/a/sub/x.get.hl",
            "modules/b/a.get.hl",
            "modules/b/z.get.hl",
            "modules/b/inner/c.get.hl",
            "modules/c/w.get.hl",
        ]

    def test_illegal_folder_and_everything_below_is_skipped(self, tmp_path):
        write_files(tmp_path, {
            "modules/.hidden/a.get.hl": "",
            "modules/.hidden/legal/b.get.hl": "",
            "modules/Upper/c.get.hl": "",
            "modules/ok/d.get.hl": "",
        })
        scanner = PathScanner(str(tmp_path))
        stats = new_stats()
        assert [f.route for f in scanner.walk(stats=stats)] == ["modules/ok/d"]
        assert stats["folders_skipped"] == 2

    def test_files_directly_in_start_folder_are_ignored(self, tmp_path):
        write_files(tmp_path, {"modules/top.get.hl": "", "modules/x/inner.get.hl": ""})
        assert [f.route for f in PathScanner(str(tmp_path)).walk()] == ["modules/x/inner"]

    def test_unknown_extension_and_verb_are_ignored(self, tmp_path):
        write_files(tmp_path, {
            "modules/x/a.get.txt": "",
            "modules/x/b.patch.hl": "",
            "modules/x/c.put.hl": "",
        })
        files = list(PathScanner(str(tmp_path)).walk())
        assert [(f.route, f.verb) for f in files] == [("modules/x/c", HttpVerb.PUT)]

    def test_empty_start_folder_walks_root(self, tmp_path):
        write_files(tmp_path, {"api/a.delete.hl": ""})
        files = list(PathScanner(str(tmp_path), start_folder="").walk())
        assert [(f.route, f.verb) for f in files] == [("api/a", HttpVerb.DELETE)]

    def test_missing_root_raises(self, tmp_path):
        """Enumeration failures are fatal."""
        scanner = PathScanner(str(tmp_path / "nope"))
        with pytest.raises(FileSystemError):
            list(scanner.walk())

    def test_walk_is_restartable(self, tmp_path):
        """Each walk re-reads the file system."""
        write_files(tmp_path, {"modules/x/a.get.hl": ""})
        scanner = PathScanner(str(tmp_path))
        assert len(list(scanner.walk())) == 1
        write_files(tmp_path, {"modules/x/b.get.hl": ""})
        assert len(list(scanner.walk())) == 2

    def test_checkpoint_is_called(self, tmp_path):
        write_files(tmp_path, {"modules/x/a.get.hl": ""})
        calls = []
        list(PathScanner(str(tmp_path)).walk(lambda: calls.append(1)))
        # once for the folder, once for the file
        assert len(calls) == 2

    def test_overlapping_walks_keep_separate_counters(self, tmp_path):
        """Starting a second walk mid-way does not touch the first walk's counters."""
        write_files(tmp_path, {
            "modules/a/x.get.hl": "",
            "modules/a/y.patch.hl": "",
            "modules/b/z.get.hl": "",
            "modules/c/w.get.hl": "",
            "modules/.hidden/v.get.hl": "",
        })
        scanner = PathScanner(str(tmp_path))
        first_stats, second_stats = new_stats(), new_stats()
        first = scanner.walk(stats=first_stats)
        next(first)
        assert len(list(scanner.walk(stats=second_stats))) == 3
        list(first)
        expected = {"folders_scanned": 3, "folders_skipped": 1, "files_skipped": 1}
        assert first_stats == expected
        assert second_stats == expected
