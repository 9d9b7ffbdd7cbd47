"""RemoteClient protocol — the network surface the core consumes.

Every method is a single request/response exchange.  Implementations
raise ``PathNotFoundError`` when the remote object is absent and
``ConflictError`` when a write is rejected because of a stale sha;
the core never retries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .types import Account, BlobContent, OwnerKind, RemoteRepo, RemoteTree


@runtime_checkable
class RemoteClient(Protocol):
    """Core interface every remote client must implement."""

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def current_identity(self) -> Account: ...

    async def get_user(self, name: str) -> Account: ...

    async def get_org(self, name: str) -> Account: ...

    async def list_orgs(self) -> list[Account]:
        """Organizations visible to the current identity."""
        ...

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def list_repos(self, kind: OwnerKind, owner: str) -> list[RemoteRepo]: ...

    async def get_repo(self, owner: str, name: str) -> RemoteRepo: ...

    async def create_repo(self, kind: OwnerKind, owner: str, name: str) -> RemoteRepo: ...

    async def delete_repo(self, owner: str, name: str) -> None: ...

    # ------------------------------------------------------------------
    # Git database
    # ------------------------------------------------------------------

    async def get_default_branch_head_commit(self, owner: str, repo: str) -> str | None:
        """Commit sha at the head of the default branch.

        ``None`` when the repository has no commits yet.
        """
        ...

    async def get_tree(
        self,
        owner: str,
        repo: str,
        sha: str,
        *,
        recursive: bool = False,
    ) -> RemoteTree: ...

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    async def get_blob_content(self, owner: str, repo: str, path: str) -> BlobContent: ...

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        content: bytes,
    ) -> str:
        """Create a file and return the new blob sha."""
        ...

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
        content: bytes,
    ) -> str:
        """Replace a file's content and return the new blob sha."""
        ...

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
    ) -> None: ...

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None: ...
