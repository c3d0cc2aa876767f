"""
GitHub Service for AI Issue Resolver.

Provides the repository operations the workflows need: branches, file
contents, pull requests, labels and comments.
"""

import base64
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import httpx

from issue_resolver.exceptions import (
    ConfigurationError,
    RemoteError,
    RemoteNotFound,
    RemoteWriteConflict,
)
from issue_resolver.services.telemetry import Telemetry


@dataclass
class RemoteFile:
    """A file that exists on a branch."""

    path: str
    sha: str


@dataclass
class PRFile:
    """Represents a file changed in a PR."""

    filename: str
    status: str  # added, removed, modified, renamed
    additions: int
    deletions: int
    changes: int
    patch: Optional[str] = None


@dataclass
class PullRequest:
    """Represents details of a Pull Request."""

    number: int
    title: str
    body: Optional[str]
    state: str
    head_ref: str
    base_ref: str
    html_url: str


class GitHubService:
    """
    GitHub REST integration bound to one repository.

    Failures are raised, not swallowed: 404 becomes RemoteNotFound, 409
    becomes RemoteWriteConflict and any other error status a RemoteError.
    The one exception is ``get_content``, which reports a missing file as None.
    """

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        """
        Initialize the GitHub Service.

        Args:
            token: GitHub token.
            repository: Repository in ``owner/repo`` form.
            api_url: GitHub API base URL.
            timeout: Per-request timeout in seconds.
            telemetry: Event sink for API calls.
        """
        self._logger = logging.getLogger("issue_resolver.github_service")

        owner, _, name = repository.partition("/")
        if not owner or not name:
            raise ConfigurationError(f"Repository must be in owner/repo form, got {repository!r}")

        self._token = token
        self._owner = owner
        self._repo = name
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._telemetry = telemetry or Telemetry(enabled=False)

        self._rate_limit_remaining = 5000

    @property
    def is_configured(self) -> bool:
        """Check if GitHub is properly configured."""
        return bool(self._token and self._token != "your_github_token_here")

    @property
    def repository(self) -> str:
        """Repository in ``owner/repo`` form."""
        return f"{self._owner}/{self._repo}"

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "AI-Issue-Resolver/1.0",
        }
        if self.is_configured:
            headers["Authorization"] = f"token {self._token}"
        return headers

    def _repo_endpoint(self, path: str) -> str:
        return f"/repos/{self._owner}/{self._repo}{path}"

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text
        if isinstance(data, dict):
            return str(data.get("message", ""))
        return ""

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs,
    ) -> Optional[Any]:
        """
        Make a request to the GitHub API.

        Args:
            method: HTTP method.
            endpoint: API endpoint.
            **kwargs: Additional arguments for httpx.

        Returns:
            Response JSON, or None for empty responses.

        Raises:
            ConfigurationError: If no token is configured.
            RemoteNotFound: On 404.
            RemoteWriteConflict: On 409.
            RemoteError: On any other error status or transport failure.
        """
        if not self.is_configured:
            raise ConfigurationError("GitHub token not configured")

        url = f"{self._api_url}{endpoint}"
        headers = self._get_headers()

        self._telemetry.log_api_call(endpoint, method, kwargs.get("params"))
        start = time.perf_counter()

        async with httpx.AsyncClient() as client:
            try:
                response = await client.request(
                    method,
                    url,
                    headers=headers,
                    timeout=self._timeout,
                    **kwargs,
                )
            except httpx.RequestError as e:
                self._logger.error(f"Request failed: {method} {endpoint}: {e}")
                raise RemoteError(f"{method} {endpoint} failed: {e}") from e

        status_code = response.status_code
        self._telemetry.log_api_response(
            endpoint, status_code, (time.perf_counter() - start) * 1000
        )

        self._rate_limit_remaining = int(
            response.headers.get("X-RateLimit-Remaining", self._rate_limit_remaining)
        )
        if self._rate_limit_remaining < 10:
            self._logger.warning(
                f"GitHub rate limit nearly exhausted: {self._rate_limit_remaining} left"
            )

        if status_code == 404:
            self._logger.debug(f"Resource not found: {endpoint}")
            raise RemoteNotFound(f"Not found: {method} {endpoint}", status_code)

        if status_code == 409:
            message = self._error_message(response)
            self._logger.error(f"Conflict on {method} {endpoint}: {message}")
            raise RemoteWriteConflict(f"Conflict on {endpoint}: {message}", status_code)

        if status_code >= 400:
            message = self._error_message(response)
            self._logger.error(f"GitHub API error {status_code} on {method} {endpoint}: {message}")
            raise RemoteError(
                f"GitHub API error {status_code} on {method} {endpoint}: {message}",
                status_code,
            )

        if status_code == 204:
            return None
        return response.json()

    async def get_ref(self, branch: str) -> str:
        """
        Get the commit sha a branch points to.

        Args:
            branch: Branch name.

        Returns:
            Commit sha.
        """
        data = await self._make_request("GET", self._repo_endpoint(f"/git/ref/heads/{branch}"))
        return data["object"]["sha"]

    async def create_ref(self, branch: str, sha: str) -> None:
        """Create ``refs/heads/<branch>`` at a commit."""
        await self._make_request(
            "POST",
            self._repo_endpoint("/git/refs"),
            json={"ref": f"refs/heads/{branch}", "sha": sha},
        )

    async def create_branch(self, branch: str, base: str) -> str:
        """
        Create a branch from the head of another branch.

        Args:
            branch: New branch name.
            base: Branch to start from.

        Returns:
            Commit sha the new branch points to.
        """
        sha = await self.get_ref(base)
        await self.create_ref(branch, sha)
        self._logger.info(f"Created branch {branch} from {base} at {sha[:7]}")
        return sha

    async def get_content(self, path: str, ref: str) -> Optional[RemoteFile]:
        """
        Look up a file on a branch.

        Args:
            path: Repository-relative file path.
            ref: Branch, tag or commit sha.

        Returns:
            RemoteFile with the blob sha, or None if the file does not exist.
        """
        try:
            data = await self._make_request(
                "GET",
                self._repo_endpoint(f"/contents/{quote(path)}"),
                params={"ref": ref},
            )
        except RemoteNotFound:
            return None

        if not isinstance(data, dict):
            raise RemoteError(f"{path} is a directory on {ref}")

        return RemoteFile(path=data.get("path", path), sha=data["sha"])

    async def get_file_text(self, path: str, ref: str) -> Optional[str]:
        """
        Get decoded content of a file at a specific ref.

        Returns:
            File content, or None if the file does not exist or is not text.
        """
        try:
            data = await self._make_request(
                "GET",
                self._repo_endpoint(f"/contents/{quote(path)}"),
                params={"ref": ref},
            )
        except RemoteNotFound:
            return None

        if not isinstance(data, dict):
            return None

        content = data.get("content", "")
        if data.get("encoding", "base64") == "base64" and content:
            try:
                return base64.b64decode(content).decode("utf-8")
            except (ValueError, UnicodeDecodeError) as e:
                self._logger.warning(f"Skipping undecodable file {path}: {e}")
                return None

        return content

    async def create_or_update_file(
        self,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: Optional[str] = None,
    ) -> None:
        """
        Write a file as one commit.

        Args:
            path: Repository-relative file path.
            content: New file content (text; base64-encoded here).
            message: Commit message.
            branch: Target branch.
            sha: Blob sha of the file being replaced; omit to create.

        Raises:
            RemoteWriteConflict: If ``sha`` is stale or the file appeared
                since it was looked up.
        """
        data = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha is not None:
            data["sha"] = sha

        try:
            await self._make_request(
                "PUT",
                self._repo_endpoint(f"/contents/{quote(path)}"),
                json=data,
            )
        except RemoteWriteConflict:
            raise
        except RemoteError as e:
            # 422 "sha wasn't supplied" means the file was created concurrently.
            if e.status_code == 422 and "sha" in str(e):
                raise RemoteWriteConflict(str(e), e.status_code) from e
            raise

    async def create_pull_request(self, title: str, body: str, head: str, base: str) -> int:
        """
        Open a pull request.

        Returns:
            The new pull request number.
        """
        data = await self._make_request(
            "POST",
            self._repo_endpoint("/pulls"),
            json={"title": title, "body": body, "head": head, "base": base},
        )
        return data["number"]

    async def add_labels(self, number: int, labels: list[str]) -> None:
        """Add labels to an issue or pull request."""
        await self._make_request(
            "POST",
            self._repo_endpoint(f"/issues/{number}/labels"),
            json={"labels": labels},
        )

    async def get_pull_request(self, number: int) -> PullRequest:
        """
        Get details of a Pull Request.

        Args:
            number: PR number.

        Returns:
            PullRequest record.
        """
        pr_data = await self._make_request("GET", self._repo_endpoint(f"/pulls/{number}"))

        return PullRequest(
            number=pr_data.get("number", number),
            title=pr_data.get("title", ""),
            body=pr_data.get("body"),
            state=pr_data.get("state", "open"),
            head_ref=pr_data.get("head", {}).get("ref", ""),
            base_ref=pr_data.get("base", {}).get("ref", ""),
            html_url=pr_data.get("html_url", ""),
        )

    async def list_pr_files(self, number: int) -> list[PRFile]:
        """
        List files changed in a Pull Request.

        Args:
            number: PR number.

        Returns:
            Changed files in API order.
        """
        files_data = await self._make_request(
            "GET",
            self._repo_endpoint(f"/pulls/{number}/files"),
            params={"per_page": 100},
        )

        return [
            PRFile(
                filename=file.get("filename", ""),
                status=file.get("status", "modified"),
                additions=file.get("additions", 0),
                deletions=file.get("deletions", 0),
                changes=file.get("changes", 0),
                patch=file.get("patch"),
            )
            for file in files_data or []
        ]

    async def create_comment(self, number: int, body: str) -> None:
        """
        Add a comment to an issue or pull request.

        Args:
            number: Issue or PR number.
            body: Comment content in markdown.
        """
        await self._make_request(
            "POST",
            self._repo_endpoint(f"/issues/{number}/comments"),
            json={"body": body},
        )
