"""GitHubClient — ``RemoteClient`` implementation over the GitHub REST API."""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from hubfs.fs.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    PathNotFoundError,
    RemoteError,
    UnsupportedOperationError,
)
from hubfs.fs.types import (
    Account,
    BlobContent,
    OwnerKind,
    RemoteRepo,
    RemoteTree,
    TreeEntry,
    TreeEntryKind,
)

from .config import ClientConfig

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

_TREE_KINDS = {kind.value: kind for kind in TreeEntryKind}


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return f"{response.status_code} {data['message']}"
    return f"{response.status_code} {response.reason_phrase}"


def _account(data: dict[str, Any]) -> Account:
    kind = OwnerKind.ORG if data.get("type") == "Organization" else OwnerKind.USER
    return Account(login=data["login"], kind=kind)


def _repo(data: dict[str, Any]) -> RemoteRepo:
    return RemoteRepo(
        owner=data["owner"]["login"],
        name=data["name"],
        default_branch=data.get("default_branch") or "main",
    )


def _encode(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")


class GitHubClient:
    """Async GitHub client.

    The underlying ``httpx.AsyncClient`` is created on first use and
    closed by :meth:`close` (or on leaving ``async with``).

    Usage::

        async with GitHubClient(ClientConfig.from_env()) as client:
            me = await client.current_identity()
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.api_url,
                headers=self.config.headers,
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        writing: bool = False,
    ) -> httpx.Response:
        try:
            response = await self.client.request(method, url, params=params, json=json)
        except httpx.HTTPError as err:
            raise RemoteError(f"{method} {url} failed: {err}") from err

        logger.debug("%s %s -> %d", method, url, response.status_code)
        self._raise_for_status(response, writing=writing)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, *, writing: bool = False) -> None:
        status = response.status_code
        if status < 400:
            return

        message = _error_message(response)
        if status == 401:
            raise AuthenticationError(message)
        if status == 403:
            raise ForbiddenError(message)
        if status == 404:
            raise PathNotFoundError(message)
        if status == 409 or (status == 422 and writing):
            raise ConflictError(message)
        raise RemoteError(message, status_code=status)

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._request("GET", url, params=params)
        return response.json()

    async def _get_paginated(self, url: str) -> list[dict[str, Any]]:
        """Follow ``Link: rel="next"`` headers and concatenate every page."""
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        params: dict[str, Any] | None = {"per_page": self.config.per_page}
        while next_url is not None:
            response = await self._request("GET", next_url, params=params)
            items.extend(response.json())
            next_url = response.links.get("next", {}).get("url")
            params = None  # the next link already carries the query
        return items

    @staticmethod
    def _contents_url(owner: str, repo: str, path: str) -> str:
        return f"/repos/{owner}/{repo}/contents/{quote(path, safe='/')}"

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def current_identity(self) -> Account:
        data = await self._get_json("/user")
        return Account(login=data["login"], kind=OwnerKind.USER)

    async def get_user(self, name: str) -> Account:
        return _account(await self._get_json(f"/users/{name}"))

    async def get_org(self, name: str) -> Account:
        data = await self._get_json(f"/orgs/{name}")
        return Account(login=data["login"], kind=OwnerKind.ORG)

    async def list_orgs(self) -> list[Account]:
        return [
            Account(login=item["login"], kind=OwnerKind.ORG)
            for item in await self._get_paginated("/user/orgs")
        ]

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def list_repos(self, kind: OwnerKind, owner: str) -> list[RemoteRepo]:
        prefix = "orgs" if kind is OwnerKind.ORG else "users"
        return [_repo(item) for item in await self._get_paginated(f"/{prefix}/{owner}/repos")]

    async def get_repo(self, owner: str, name: str) -> RemoteRepo:
        return _repo(await self._get_json(f"/repos/{owner}/{name}"))

    async def create_repo(self, kind: OwnerKind, owner: str, name: str) -> RemoteRepo:
        if kind is OwnerKind.ORG:
            url = f"/orgs/{owner}/repos"
        else:
            # /user/repos always creates under the authenticated account
            identity = await self.current_identity()
            if identity.login.lower() != owner.lower():
                raise UnsupportedOperationError(
                    f"Cannot create a repository for another user: {owner!r}"
                )
            url = "/user/repos"
        response = await self._request("POST", url, json={"name": name}, writing=True)
        return _repo(response.json())

    async def delete_repo(self, owner: str, name: str) -> None:
        await self._request("DELETE", f"/repos/{owner}/{name}")

    # ------------------------------------------------------------------
    # Git database
    # ------------------------------------------------------------------

    async def get_default_branch_head_commit(self, owner: str, repo: str) -> str | None:
        remote = await self.get_repo(owner, repo)
        try:
            data = await self._get_json(
                f"/repos/{owner}/{repo}/branches/{quote(remote.default_branch, safe='')}"
            )
        except PathNotFoundError:
            logger.debug("%s/%s has no default branch yet", owner, repo)
            return None
        return data["commit"]["sha"]

    async def get_tree(
        self,
        owner: str,
        repo: str,
        sha: str,
        *,
        recursive: bool = False,
    ) -> RemoteTree:
        params = {"recursive": "1"} if recursive else None
        data = await self._get_json(f"/repos/{owner}/{repo}/git/trees/{sha}", params=params)
        entries = [
            TreeEntry(path=item["path"], kind=_TREE_KINDS[item["type"]], sha=item["sha"])
            for item in data.get("tree", [])
            if item.get("type") in _TREE_KINDS
        ]
        return RemoteTree(
            sha=data.get("sha", sha),
            entries=entries,
            truncated=bool(data.get("truncated", False)),
        )

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    async def get_blob_content(self, owner: str, repo: str, path: str) -> BlobContent:
        data = await self._get_json(self._contents_url(owner, repo, path))
        if isinstance(data, list) or data.get("type") != "file":
            raise UnsupportedOperationError(f"Not a file: {owner}/{repo}/{path}")

        if data.get("encoding") == "base64" and data.get("content") is not None:
            return BlobContent(content=base64.b64decode(data["content"]), sha=data["sha"])

        # Files over 1 MB come back without inline content
        blob = await self._get_json(f"/repos/{owner}/{repo}/git/blobs/{data['sha']}")
        return BlobContent(content=base64.b64decode(blob["content"]), sha=data["sha"])

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        content: bytes,
    ) -> str:
        body = {"message": message, "content": _encode(content)}
        response = await self._request(
            "PUT", self._contents_url(owner, repo, path), json=body, writing=True
        )
        return response.json()["content"]["sha"]

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
        content: bytes,
    ) -> str:
        body = {"message": message, "content": _encode(content), "sha": sha}
        response = await self._request(
            "PUT", self._contents_url(owner, repo, path), json=body, writing=True
        )
        return response.json()["content"]["sha"]

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
    ) -> None:
        body = {"message": message, "sha": sha}
        await self._request(
            "DELETE", self._contents_url(owner, repo, path), json=body, writing=True
        )
