"""Shared fixtures for hubfs tests."""

from __future__ import annotations

import hashlib
from typing import Any

import pytest

from hubfs.fs.exceptions import ConflictError, PathNotFoundError
from hubfs.fs.handle import DriveHandle
from hubfs.fs.types import (
    Account,
    BlobContent,
    OwnerKind,
    RemoteRepo,
    RemoteTree,
    TreeEntry,
    TreeEntryKind,
)

MUTATING_CALLS = frozenset(
    {"create_file", "update_file", "delete_file", "create_repo", "delete_repo"}
)


def blob_sha(content: bytes) -> str:
    """Git-style blob hash."""
    return hashlib.sha1(b"blob %d\0" % len(content) + content).hexdigest()


def _tree_sha(node: dict[str, Any]) -> str:
    h = hashlib.sha1(b"tree\0")
    for name in sorted(node):
        child = node[name]
        if isinstance(child, dict):
            h.update(f"tree {name} {_tree_sha(child)}\n".encode())
        else:
            h.update(f"blob {name} {blob_sha(child)}\n".encode())
    return h.hexdigest()


def _nest(files: dict[str, bytes]) -> dict[str, Any]:
    root: dict[str, Any] = {}
    for path, content in files.items():
        parts = path.split("/")
        node = root
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = content
    return root


class FakeRemote:
    """In-memory ``RemoteClient`` with git-like hashing and call recording.

    Repositories are flat ``{path: bytes}`` maps; trees and shas are
    derived from them on every call, so any edit made directly to
    ``repos`` is visible to the next fetch.
    """

    def __init__(self, login: str = "me") -> None:
        self.login = login
        self.users: set[str] = {login}
        self.orgs: set[str] = set()
        self.repos: dict[tuple[str, str], dict[str, bytes]] = {}
        self.truncated: set[tuple[str, str]] = set()
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------

    def add_repo(self, owner: str, name: str, files: dict[str, bytes | str] | None = None) -> None:
        self.repos[(owner, name)] = {
            path: content.encode() if isinstance(content, str) else content
            for path, content in (files or {}).items()
        }

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    @property
    def mutation_calls(self) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] in MUTATING_CALLS]

    def reset_calls(self) -> None:
        self.calls.clear()

    def _files(self, owner: str, repo: str) -> dict[str, bytes]:
        try:
            return self.repos[(owner, repo)]
        except KeyError:
            raise PathNotFoundError(f"404 Not Found: {owner}/{repo}") from None

    def _tree_index(self, owner: str, repo: str) -> tuple[str | None, dict[str, dict[str, Any]]]:
        files = self._files(owner, repo)
        if not files:
            return None, {}
        root = _nest(files)
        index: dict[str, dict[str, Any]] = {}

        def visit(node: dict[str, Any]) -> None:
            index[_tree_sha(node)] = node
            for child in node.values():
                if isinstance(child, dict):
                    visit(child)

        visit(root)
        return "commit-" + _tree_sha(root), index

    @staticmethod
    def _entries(node: dict[str, Any], prefix: str, recursive: bool) -> list[TreeEntry]:
        entries: list[TreeEntry] = []
        for name in sorted(node):
            child = node[name]
            path = f"{prefix}{name}"
            if isinstance(child, dict):
                entries.append(TreeEntry(path, TreeEntryKind.TREE, _tree_sha(child)))
                if recursive:
                    entries.extend(FakeRemote._entries(child, path + "/", recursive))
            else:
                entries.append(TreeEntry(path, TreeEntryKind.BLOB, blob_sha(child)))
        return entries

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def current_identity(self) -> Account:
        self.calls.append(("current_identity",))
        return Account(self.login, OwnerKind.USER)

    async def get_user(self, name: str) -> Account:
        self.calls.append(("get_user", name))
        if name not in self.users:
            raise PathNotFoundError(f"404 Not Found: user {name}")
        return Account(name, OwnerKind.USER)

    async def get_org(self, name: str) -> Account:
        self.calls.append(("get_org", name))
        if name not in self.orgs:
            raise PathNotFoundError(f"404 Not Found: org {name}")
        return Account(name, OwnerKind.ORG)

    async def list_orgs(self) -> list[Account]:
        self.calls.append(("list_orgs",))
        return [Account(name, OwnerKind.ORG) for name in sorted(self.orgs)]

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def list_repos(self, kind: OwnerKind, owner: str) -> list[RemoteRepo]:
        self.calls.append(("list_repos", kind, owner))
        return [RemoteRepo(o, n) for (o, n) in sorted(self.repos) if o == owner]

    async def get_repo(self, owner: str, name: str) -> RemoteRepo:
        self.calls.append(("get_repo", owner, name))
        self._files(owner, name)
        return RemoteRepo(owner, name)

    async def create_repo(self, kind: OwnerKind, owner: str, name: str) -> RemoteRepo:
        self.calls.append(("create_repo", kind, owner, name))
        if (owner, name) in self.repos:
            raise ConflictError(f"422 name already exists on this account: {name}")
        self.repos[(owner, name)] = {}
        return RemoteRepo(owner, name)

    async def delete_repo(self, owner: str, name: str) -> None:
        self.calls.append(("delete_repo", owner, name))
        self._files(owner, name)
        del self.repos[(owner, name)]

    # ------------------------------------------------------------------
    # Git database
    # ------------------------------------------------------------------

    async def get_default_branch_head_commit(self, owner: str, repo: str) -> str | None:
        self.calls.append(("get_default_branch_head_commit", owner, repo))
        head, _ = self._tree_index(owner, repo)
        return head

    async def get_tree(
        self, owner: str, repo: str, sha: str, *, recursive: bool = False
    ) -> RemoteTree:
        self.calls.append(("get_tree", owner, repo, sha, recursive))
        head, index = self._tree_index(owner, repo)
        tree_sha = sha[len("commit-") :] if sha == head else sha
        if tree_sha not in index:
            raise PathNotFoundError(f"404 Not Found: tree {sha}")
        return RemoteTree(
            sha=tree_sha,
            entries=self._entries(index[tree_sha], "", recursive),
            truncated=(owner, repo) in self.truncated,
        )

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    async def get_blob_content(self, owner: str, repo: str, path: str) -> BlobContent:
        self.calls.append(("get_blob_content", owner, repo, path))
        files = self._files(owner, repo)
        if path not in files:
            raise PathNotFoundError(f"404 Not Found: {path}")
        return BlobContent(files[path], blob_sha(files[path]))

    async def create_file(
        self, owner: str, repo: str, path: str, message: str, content: bytes
    ) -> str:
        self.calls.append(("create_file", owner, repo, path, message))
        files = self._files(owner, repo)
        if path in files:
            raise ConflictError('422 "sha" wasn\'t supplied')
        files[path] = content
        return blob_sha(content)

    async def update_file(
        self, owner: str, repo: str, path: str, message: str, sha: str, content: bytes
    ) -> str:
        self.calls.append(("update_file", owner, repo, path, message, sha))
        files = self._files(owner, repo)
        if path not in files:
            raise PathNotFoundError(f"404 Not Found: {path}")
        if blob_sha(files[path]) != sha:
            raise ConflictError(f"409 {path} does not match {sha}")
        files[path] = content
        return blob_sha(content)

    async def delete_file(
        self, owner: str, repo: str, path: str, message: str, sha: str
    ) -> None:
        self.calls.append(("delete_file", owner, repo, path, message, sha))
        files = self._files(owner, repo)
        if path not in files:
            raise PathNotFoundError(f"404 Not Found: {path}")
        if blob_sha(files[path]) != sha:
            raise ConflictError(f"409 {path} does not match {sha}")
        del files[path]

    async def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def remote() -> FakeRemote:
    """Remote with one org, two users and a handful of repositories.

    octo/widgets:  README.md, src/app.py, src/lib/util.py
    octo/empty:    no commits
    me/dotfiles:   .bashrc
    """
    fake = FakeRemote(login="me")
    fake.orgs.add("octo")
    fake.users.add("alice")
    fake.add_repo(
        "octo",
        "widgets",
        {
            "README.md": "# widgets\n",
            "src/app.py": "print('hi')\n",
            "src/lib/util.py": "x = 1\n",
        },
    )
    fake.add_repo("octo", "empty")
    fake.add_repo("me", "dotfiles", {".bashrc": "export EDITOR=vi\n"})
    return fake


@pytest.fixture
def handle(remote: FakeRemote) -> DriveHandle:
    return DriveHandle(client=remote)
