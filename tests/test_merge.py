"""Tests for common ancestor search and branch merge (clean, one-sided, conflict)."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mygit.constants import MARKER_CURRENT, MARKER_SEPARATOR, MARKER_SOURCE, MERGE_OUTPUT_FILE
from mygit.errors import BranchNotFoundError, InvalidStateError, NoCommonAncestorError
from mygit.graph import find_common_ancestor, walk_history
from mygit.merge import merge_branch, merge_texts
from mygit.plumbing import commit_tree, merge_base
from mygit.porcelain import add_path, branch_create, checkout_branch, commit
from mygit.refs import resolve_branch, set_branch, write_head_detached
from mygit.repo import Repository


class TestMergeTexts(unittest.TestCase):
    def test_identical_sides(self) -> None:
        r = merge_texts("base", "same", "same")
        self.assertFalse(r.conflict)
        self.assertEqual(r.text, "same")

    def test_only_theirs_changed(self) -> None:
        r = merge_texts("base", "base", "theirs")
        self.assertFalse(r.conflict)
        self.assertEqual(r.text, "theirs")

    def test_only_ours_changed(self) -> None:
        r = merge_texts("base", "ours", "base")
        self.assertFalse(r.conflict)
        self.assertEqual(r.text, "ours")

    def test_both_changed_conflict(self) -> None:
        r = merge_texts("base", "ours", "theirs")
        self.assertTrue(r.conflict)
        self.assertEqual(
            r.text,
            f"{MARKER_CURRENT}\nours\n{MARKER_SEPARATOR}\ntheirs\n{MARKER_SOURCE}\n",
        )


class _RepoCase(unittest.TestCase):
    def setUp(self) -> None:
        env = mock.patch.dict(
            os.environ,
            {"MYGIT_AUTHOR_NAME": "Alice", "MYGIT_AUTHOR_DATE": "2024-01-02 03:04:05"},
        )
        env.start()
        self.addCleanup(env.stop)
        self.repo_dir = Path(tempfile.mkdtemp(prefix="mygit_merge_"))
        self.repo = Repository(str(self.repo_dir))
        self.repo.init()

    def _commit_file(self, name: str, text: str, message: str) -> str:
        (self.repo_dir / name).write_text(text)
        add_path(self.repo, name)
        return commit(self.repo, message)

    def _branch(self, name: str) -> str:
        return resolve_branch(self.repo.git_dir, name)


class TestCommonAncestor(_RepoCase):
    def test_fork_point(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        branch_create(self.repo, "feature")
        b = self._commit_file("f.txt", "B\n", "B")
        checkout_branch(self.repo, "feature")
        c = self._commit_file("f.txt", "C\n", "C")
        self.assertEqual(find_common_ancestor(self.repo, b, c), a)
        self.assertEqual(find_common_ancestor(self.repo, c, b), a)
        self.assertEqual(merge_base(self.repo, "main", "feature"), a)

    def test_same_commit(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        self.assertEqual(find_common_ancestor(self.repo, a, a), a)

    def test_ancestor_of_descendant(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        b = self._commit_file("f.txt", "B\n", "B")
        self.assertEqual(find_common_ancestor(self.repo, a, b), a)

    def test_unrelated_histories(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        set_branch(self.repo.git_dir, "orphan", "")
        checkout_branch(self.repo, "orphan")
        z = self._commit_file("g.txt", "Z\n", "Z")
        self.assertIsNone(find_common_ancestor(self.repo, a, z))

    def test_ancestor_reached_through_second_parent(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        set_branch(self.repo.git_dir, "side", "")
        checkout_branch(self.repo, "side")
        x = self._commit_file("g.txt", "X\n", "X")
        y = self._commit_file("g.txt", "Y\n", "Y")
        joined = commit_tree(self.repo, self.repo.read_commit(a).tree_hash, [a, x], "join")
        set_branch(self.repo.git_dir, "main", joined)
        self.assertEqual(find_common_ancestor(self.repo, joined, y), x)
        self.assertEqual(merge_base(self.repo, "main", "side"), x)


class TestHistoryThroughMerge(_RepoCase):
    def test_walk_skips_second_parent(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        branch_create(self.repo, "feature")
        checkout_branch(self.repo, "feature")
        b = self._commit_file("f.txt", "B\n", "B")
        checkout_branch(self.repo, "main")
        c = self._commit_file("f.txt", "C\n", "C")
        m = commit_tree(self.repo, self.repo.read_commit(c).tree_hash, [c, b], "Merge branch 'feature'")
        set_branch(self.repo.git_dir, "main", m)
        hashes = [h for h, _c in walk_history(self.repo, m)]
        self.assertEqual(hashes, [m, c, a])
        self.assertNotIn(b, hashes)

    def test_walk_after_clean_merge(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        branch_create(self.repo, "feature")
        checkout_branch(self.repo, "feature")
        b = self._commit_file("f.txt", "B\n", "B")
        checkout_branch(self.repo, "main")
        self.assertFalse(merge_branch(self.repo, "feature"))
        m = self._branch("main")
        self.assertEqual([h for h, _c in walk_history(self.repo, m)], [m, a])
        self.assertEqual(self.repo.read_commit(m).parent_hashes, [a, b])


class TestMergeBranch(_RepoCase):
    def test_same_tips_merge_commit(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        branch_create(self.repo, "feature")
        self.assertFalse(merge_branch(self.repo, "feature"))
        new_tip = self._branch("main")
        self.assertNotEqual(new_tip, a)
        merged = self.repo.read_commit(new_tip)
        self.assertEqual(merged.parent_hashes, [a, a])
        self.assertEqual(merged.tree_hash, self.repo.read_commit(a).tree_hash)
        self.assertEqual(merged.message, "Merge branch 'feature'")
        self.assertEqual(self._branch("feature"), a)

    def test_source_ahead_takes_source_tree(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        branch_create(self.repo, "feature")
        checkout_branch(self.repo, "feature")
        b = self._commit_file("f.txt", "B\n", "B")
        checkout_branch(self.repo, "main")
        self.assertFalse(merge_branch(self.repo, "feature"))
        merged = self.repo.read_commit(self._branch("main"))
        self.assertEqual(merged.parent_hashes, [a, b])
        self.assertEqual(merged.tree_hash, self.repo.read_commit(b).tree_hash)
        out = (self.repo_dir / MERGE_OUTPUT_FILE).read_text()
        self.assertEqual(out, self.repo.load_object(b).decode().strip())

    def test_current_ahead_keeps_current_tree(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        branch_create(self.repo, "feature")
        b = self._commit_file("f.txt", "B\n", "B")
        self.assertFalse(merge_branch(self.repo, "feature"))
        merged = self.repo.read_commit(self._branch("main"))
        self.assertEqual(merged.parent_hashes, [b, a])
        self.assertEqual(merged.tree_hash, self.repo.read_commit(b).tree_hash)

    def test_diverged_conflict(self) -> None:
        self._commit_file("f.txt", "A\n", "A")
        branch_create(self.repo, "feature")
        checkout_branch(self.repo, "feature")
        b = self._commit_file("f.txt", "B\n", "B")
        checkout_branch(self.repo, "main")
        c = self._commit_file("f.txt", "C\n", "C")
        self.assertTrue(merge_branch(self.repo, "feature"))
        self.assertEqual(self._branch("main"), c)
        self.assertEqual(self._branch("feature"), b)
        out = (self.repo_dir / MERGE_OUTPUT_FILE).read_text()
        i_cur = out.index(MARKER_CURRENT)
        i_sep = out.index(MARKER_SEPARATOR)
        i_src = out.index(MARKER_SOURCE)
        self.assertLess(i_cur, i_sep)
        self.assertLess(i_sep, i_src)
        self.assertIn(self.repo.load_object(c).decode().strip(), out[i_cur:i_sep])
        self.assertIn(self.repo.load_object(b).decode().strip(), out[i_sep:i_src])

    def test_merge_into_self_rejected(self) -> None:
        self._commit_file("f.txt", "A\n", "A")
        with self.assertRaises(InvalidStateError):
            merge_branch(self.repo, "main")

    def test_missing_source_branch(self) -> None:
        self._commit_file("f.txt", "A\n", "A")
        with self.assertRaises(BranchNotFoundError):
            merge_branch(self.repo, "nope")
        with self.assertRaises(BranchNotFoundError):
            merge_branch(self.repo, "../../index")

    def test_empty_branch_rejected(self) -> None:
        self._commit_file("f.txt", "A\n", "A")
        set_branch(self.repo.git_dir, "empty", "")
        with self.assertRaises(InvalidStateError):
            merge_branch(self.repo, "empty")

    def test_detached_head_rejected(self) -> None:
        a = self._commit_file("f.txt", "A\n", "A")
        branch_create(self.repo, "feature")
        write_head_detached(self.repo.git_dir, a)
        with self.assertRaises(InvalidStateError):
            merge_branch(self.repo, "feature")

    def test_no_common_ancestor(self) -> None:
        self._commit_file("f.txt", "A\n", "A")
        set_branch(self.repo.git_dir, "orphan", "")
        checkout_branch(self.repo, "orphan")
        self._commit_file("g.txt", "Z\n", "Z")
        checkout_branch(self.repo, "main")
        with self.assertRaises(NoCommonAncestorError):
            merge_branch(self.repo, "orphan")
        self.assertFalse((self.repo_dir / MERGE_OUTPUT_FILE).exists())


if __name__ == "__main__":
    unittest.main()
