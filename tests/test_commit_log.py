"""Tests for init, add, commit and first-parent history."""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from mygit.config import set_value
from mygit.errors import NothingToCommitError
from mygit.graph import walk_history
from mygit.porcelain import add_path, commit, log, status, unstage, unstage_all
from mygit.refs import head_commit, resolve_branch
from mygit.repo import Repository


class TestInit(unittest.TestCase):
    def test_init_layout(self) -> None:
        root = Path(tempfile.mkdtemp(prefix="mygit_init_"))
        repo = Repository(str(root))
        self.assertTrue(repo.init())
        self.assertTrue((root / ".mygit" / "objects").is_dir())
        self.assertEqual((root / ".mygit" / "HEAD").read_text(), "ref: refs/heads/main\n")
        self.assertEqual((root / ".mygit" / "refs" / "heads" / "main").read_text(), "")
        self.assertEqual((root / ".mygit" / "index").read_text(), "")
        self.assertFalse(repo.init())


class TestCommit(unittest.TestCase):
    def setUp(self) -> None:
        env = mock.patch.dict(
            os.environ,
            {"MYGIT_AUTHOR_NAME": "Alice", "MYGIT_AUTHOR_DATE": "2024-01-02 03:04:05"},
        )
        env.start()
        self.addCleanup(env.stop)
        self.repo_dir = Path(tempfile.mkdtemp(prefix="mygit_commit_"))
        self.repo = Repository(str(self.repo_dir))
        self.repo.init()

    def _commit_file(self, name: str, text: str, message: str) -> str:
        (self.repo_dir / name).write_text(text)
        add_path(self.repo, name)
        return commit(self.repo, message)

    def test_root_commit(self) -> None:
        h = self._commit_file("a.txt", "hello\n", "first")
        self.assertEqual(resolve_branch(self.repo.git_dir, "main"), h)
        raw = self.repo.load_object(h).decode()
        self.assertTrue(raw.startswith("tree "))
        self.assertNotIn("\nparent ", raw)
        self.assertIn("author Alice\n", raw)
        self.assertIn("date 2024-01-02 03:04:05\n", raw)
        self.assertTrue(raw.endswith("\n\nfirst\n"))

    def test_snapshot_matches_index(self) -> None:
        (self.repo_dir / "a.txt").write_text("A\n")
        (self.repo_dir / "b.txt").write_text("B\n")
        add_path(self.repo, "a.txt")
        add_path(self.repo, "b.txt")
        staged = self.repo.load_index()
        h = commit(self.repo, "two files")
        snap = self.repo.read_snapshot(self.repo.read_commit(h).tree_hash)
        self.assertEqual(snap.entries, staged)

    def test_index_cleared_after_commit(self) -> None:
        self._commit_file("a.txt", "x\n", "c1")
        self.assertEqual(self.repo.load_index(), [])
        self.assertEqual((self.repo.git_dir / "index").read_text(), "")

    def test_history_newest_first(self) -> None:
        a = self._commit_file("f.txt", "1\n", "A")
        b = self._commit_file("f.txt", "2\n", "B")
        c = self._commit_file("f.txt", "3\n", "C")
        hashes = [h for h, _c in walk_history(self.repo, head_commit(self.repo.git_dir))]
        self.assertEqual(hashes, [c, b, a])
        self.assertEqual(self.repo.read_commit(c).parent_hashes, [b])

    def test_empty_index_raises_without_side_effects(self) -> None:
        objects_before = sorted(p.name for p in self.repo.objects_dir.iterdir())
        with self.assertRaises(NothingToCommitError):
            commit(self.repo, "nothing")
        self.assertEqual(sorted(p.name for p in self.repo.objects_dir.iterdir()), objects_before)
        self.assertEqual(resolve_branch(self.repo.git_dir, "main"), "")

    def test_missing_index_raises(self) -> None:
        (self.repo.git_dir / "index").unlink()
        with self.assertRaises(NothingToCommitError):
            commit(self.repo, "nothing")

    def test_author_from_config(self) -> None:
        set_value(self.repo, "user.name", "Bob")
        h = self._commit_file("a.txt", "x\n", "by bob")
        self.assertEqual(self.repo.read_commit(h).author, "Bob")

    def test_explicit_author(self) -> None:
        (self.repo_dir / "a.txt").write_text("x\n")
        add_path(self.repo, "a.txt")
        h = commit(self.repo, "msg", author="Carol")
        self.assertEqual(self.repo.read_commit(h).author, "Carol")

    def test_log_output(self) -> None:
        self._commit_file("f.txt", "1\n", "first message")
        self._commit_file("f.txt", "2\n", "second message")
        out = io.StringIO()
        with redirect_stdout(out):
            log(self.repo)
        text = out.getvalue()
        self.assertLess(text.index("second message"), text.index("first message"))
        self.assertIn("Author: Alice", text)

        out = io.StringIO()
        with redirect_stdout(out):
            log(self.repo, max_count=1, oneline=True)
        lines = out.getvalue().strip().splitlines()
        self.assertEqual(len(lines), 1)
        self.assertTrue(lines[0].endswith("second message"))

    def test_log_no_commits(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            log(self.repo)
        self.assertIn("No commits yet!", out.getvalue())


class TestStaging(unittest.TestCase):
    def setUp(self) -> None:
        self.repo_dir = Path(tempfile.mkdtemp(prefix="mygit_stage_"))
        self.repo = Repository(str(self.repo_dir))
        self.repo.init()

    def test_add_dot_stages_everything(self) -> None:
        (self.repo_dir / "a.txt").write_text("a")
        (self.repo_dir / "sub").mkdir()
        (self.repo_dir / "sub" / "b.txt").write_text("b")
        self.assertEqual(add_path(self.repo, "."), 2)
        names = [name for _sha, name in self.repo.load_index()]
        self.assertEqual(names, ["a.txt", "sub/b.txt"])

    def test_add_missing_path(self) -> None:
        with self.assertRaises(FileNotFoundError):
            add_path(self.repo, "nope.txt")

    def test_add_stores_blob(self) -> None:
        (self.repo_dir / "a.txt").write_bytes(b"raw bytes\n")
        add_path(self.repo, "a.txt")
        sha, _name = self.repo.load_index()[0]
        self.assertEqual(self.repo.load_object(sha), b"raw bytes\n")

    def test_unstage(self) -> None:
        (self.repo_dir / "a.txt").write_text("a")
        (self.repo_dir / "b.txt").write_text("b")
        add_path(self.repo, "a.txt")
        add_path(self.repo, "b.txt")
        add_path(self.repo, "a.txt")
        unstage(self.repo, ["a.txt"])
        self.assertEqual([name for _sha, name in self.repo.load_index()], ["b.txt"])
        unstage_all(self.repo)
        self.assertEqual(self.repo.load_index(), [])

    def test_status_lists_staged(self) -> None:
        (self.repo_dir / "a.txt").write_text("a")
        add_path(self.repo, "a.txt")
        out = io.StringIO()
        with redirect_stdout(out):
            status(self.repo)
        self.assertIn("On branch main", out.getvalue())
        self.assertIn(" a.txt", out.getvalue())


if __name__ == "__main__":
    unittest.main()
