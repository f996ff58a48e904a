"""CLI: argparse and command dispatch."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .clone import clone as clone_run
from .errors import MygitError, NotARepositoryError, StorageError
from .plumbing import cat_file, hash_object, merge_base, object_kind, rev_parse
from .porcelain import (
    add_path,
    branch_create,
    branch_delete,
    branch_list,
    checkout_branch,
    commit,
    config_get,
    config_list,
    config_set,
    config_unset,
    diff_branch_pair,
    diff_file,
    log,
    merge,
    show_current_branch,
    status,
    unstage,
    unstage_all,
)
from .repo import Repository


def _repo() -> Repository:
    return Repository(Path.cwd())


def cmd_init(_: argparse.Namespace) -> int:
    repo = _repo()
    if not repo.init():
        print("Repository already initialized in this directory.")
        return 1
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    repo = _repo()
    repo.require_repo()
    for path in args.paths:
        try:
            add_path(repo, path, force=getattr(args, "force", False))
        except FileNotFoundError as e:
            print(f"Error: {e}")
            return 1
    return 0


def cmd_status(_: argparse.Namespace) -> int:
    status(_repo())
    return 0


def cmd_unstage(args: argparse.Namespace) -> int:
    repo = _repo()
    if args.all:
        unstage_all(repo)
        return 0
    if not args.paths:
        print("Usage: mygit unstage <filename>... or mygit unstage --all")
        return 1
    unstage(repo, args.paths)
    return 0


def cmd_commit(args: argparse.Namespace) -> int:
    words = list(args.words or [])
    if args.message:
        words.insert(0, args.message)
    if not words:
        print("Usage: mygit commit <message>")
        return 1
    commit(_repo(), " ".join(words), author=getattr(args, "author", None))
    return 0


def cmd_log(args: argparse.Namespace) -> int:
    log(
        _repo(),
        rev=getattr(args, "rev", None),
        max_count=args.max_count,
        oneline=getattr(args, "oneline", False),
    )
    return 0


def cmd_branch(args: argparse.Namespace) -> int:
    repo = _repo()
    if args.delete:
        if not args.name:
            print("Usage: mygit branch -d <name>")
            return 1
        branch_delete(repo, args.name)
        return 0
    if args.name:
        branch_create(repo, args.name)
        return 0
    branch_list(repo)
    return 0


def cmd_checkout(args: argparse.Namespace) -> int:
    checkout_branch(_repo(), args.branch, create=args.create_branch)
    return 0


def cmd_current_branch(_: argparse.Namespace) -> int:
    return 0 if show_current_branch(_repo()) is not None else 1


def cmd_merge(args: argparse.Namespace) -> int:
    conflict = merge(_repo(), args.name)
    return 1 if conflict else 0


def cmd_diff(args: argparse.Namespace) -> int:
    repo = _repo()
    if args.second is not None:
        diff_branch_pair(repo, args.first, args.second)
    else:
        diff_file(repo, args.first)
    return 0


def cmd_clone(args: argparse.Namespace) -> int:
    repo = clone_run(args.src, args.dest)
    print(f"Repository cloned successfully to: {repo.path}")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    repo = _repo()
    if args.list:
        config_list(repo)
        return 0
    if not args.key:
        print("Error: config requires a key (section.option)")
        return 1
    if args.unset:
        config_unset(repo, args.key)
        return 0
    if args.config_set or args.value is not None:
        if args.value is None:
            print("Error: --set requires a value")
            return 1
        config_set(repo, args.key, args.value)
        return 0
    config_get(repo, args.key)
    return 0


def cmd_hash_object(args: argparse.Namespace) -> int:
    try:
        print(hash_object(_repo(), args.path, args.write))
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    return 0


def cmd_cat_file(args: argparse.Namespace) -> int:
    content = cat_file(_repo(), args.object)
    if args.type_only:
        print(object_kind(content))
    else:
        sys.stdout.write(content.decode("utf-8", errors="replace"))
        sys.stdout.flush()
    return 0


def cmd_merge_base(args: argparse.Namespace) -> int:
    base = merge_base(_repo(), args.rev_a, args.rev_b)
    if base is None:
        print("Error: No common ancestor found.")
        return 1
    print(base)
    return 0


def cmd_rev_parse(args: argparse.Namespace) -> int:
    print(rev_parse(_repo(), args.name))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mygit",
        description="A minimal version control system (init, add, commit, log, branch, checkout, merge, diff, clone).",
    )
    sub = parser.add_subparsers(dest="command", help="Commands")

    # init
    sub.add_parser("init", help="Initialize a new repository")

    # add
    p_add = sub.add_parser("add", help="Stage files (use '.' to stage everything)")
    p_add.add_argument("paths", nargs="+", help="Files or directories to stage")
    p_add.add_argument("-f", "--force", action="store_true", help="Allow staging ignored files")

    # status
    sub.add_parser("status", help="Show staged files")

    # unstage
    p_unstage = sub.add_parser("unstage", help="Remove files from the staging area")
    p_unstage.add_argument("paths", nargs="*", help="Files to unstage")
    p_unstage.add_argument("--all", action="store_true", help="Clear the staging area")

    # commit
    p_commit = sub.add_parser("commit", help="Commit staged files")
    p_commit.add_argument("words", nargs="*", help="Commit message (words are joined with spaces)")
    p_commit.add_argument("-m", "--message", help="Commit message")
    p_commit.add_argument("--author", help="Author name (default: user.name or OS user)")

    # log
    p_log = sub.add_parser("log", help="Show commit history (first parent)")
    p_log.add_argument("rev", nargs="?", default=None, help="Start from revision (default: HEAD)")
    p_log.add_argument("-n", "--max-count", type=int, default=None, help="Limit number of commits")
    p_log.add_argument("--oneline", action="store_true", help="One line per commit (short hash + message)")

    # branch
    p_branch = sub.add_parser("branch", help="List, create or delete branches")
    p_branch.add_argument("name", nargs="?", help="Branch name")
    p_branch.add_argument("-d", "--delete", action="store_true", help="Delete branch")

    # checkout
    p_checkout = sub.add_parser("checkout", help="Switch branch, create one with -b, or detach HEAD at a commit")
    p_checkout.add_argument("branch", help="Branch name or commit hash")
    p_checkout.add_argument("-b", "--create-branch", action="store_true", help="Create and switch to new branch")

    # current-branch
    sub.add_parser("current-branch", help="Show the current branch")

    # merge
    p_merge = sub.add_parser("merge", help="Merge a branch into the current branch")
    p_merge.add_argument("name", help="Branch to merge")

    # diff
    p_diff = sub.add_parser("diff", help="Diff a file against the index, or two branches")
    p_diff.add_argument("first", help="File name, or first branch")
    p_diff.add_argument("second", nargs="?", default=None, help="Second branch")

    # clone
    p_clone = sub.add_parser("clone", help="Copy a repository to a new directory")
    p_clone.add_argument("src", help="Source path")
    p_clone.add_argument("dest", help="Destination directory")

    # config
    p_config = sub.add_parser("config", help="Read or write config (.mygit/config)")
    p_config.add_argument("--get", action="store_true", help="Get value for key")
    p_config.add_argument("--set", dest="config_set", action="store_true", help="Set key to value")
    p_config.add_argument("--unset", action="store_true", help="Unset key")
    p_config.add_argument("--list", action="store_true", help="List all key=value")
    p_config.add_argument("key", nargs="?", default=None, help="Config key (section.option)")
    p_config.add_argument("value", nargs="?", default=None, help="Value (for --set)")

    # hash-object
    p_ho = sub.add_parser("hash-object", help="Compute blob hash (optionally write)")
    p_ho.add_argument("path", help="Path to file")
    p_ho.add_argument("-w", "--write", action="store_true", help="Write object to the store")

    # cat-file
    p_cat = sub.add_parser("cat-file", help="Show object kind or content")
    p_cat.add_argument("-t", "--type", dest="type_only", action="store_true", help="Show kind only")
    p_cat.add_argument("object", help="Object (hash, branch, or HEAD)")

    # merge-base
    p_mb = sub.add_parser("merge-base", help="Find a common ancestor of two commits")
    p_mb.add_argument("rev_a", help="First revision")
    p_mb.add_argument("rev_b", help="Second revision")

    # rev-parse
    p_rp = sub.add_parser("rev-parse", help="Resolve name to 40-char hash")
    p_rp.add_argument("name", help="Branch, HEAD or object prefix")

    return parser


HANDLERS = {
    "init": cmd_init,
    "add": cmd_add,
    "status": cmd_status,
    "unstage": cmd_unstage,
    "commit": cmd_commit,
    "log": cmd_log,
    "branch": cmd_branch,
    "checkout": cmd_checkout,
    "current-branch": cmd_current_branch,
    "merge": cmd_merge,
    "diff": cmd_diff,
    "clone": cmd_clone,
    "config": cmd_config,
    "hash-object": cmd_hash_object,
    "cat-file": cmd_cat_file,
    "merge-base": cmd_merge_base,
    "rev-parse": cmd_rev_parse,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0
    handler = HANDLERS.get(args.command)
    if not handler:
        parser.print_help()
        return 1
    try:
        return handler(args) or 0
    except NotARepositoryError:
        print("Not a mygit repository")
        return 1
    except MygitError as e:
        print(f"Error: {e}")
        return 1
    except OSError as e:
        print(f"Error: {StorageError(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
