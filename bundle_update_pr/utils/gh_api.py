from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests

from bundle_update_pr.errors import HostingApiError
from bundle_update_pr.run_context import HostConfig, RepositoryCoordinates
from bundle_update_pr.utils.logger import log_api_response, log_error


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    head_ref: str
    html_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequest":
        return cls(
            number=int(data.get("number", 0) or 0),
            title=data.get("title") or "",
            head_ref=(data.get("head") or {}).get("ref") or "",
            html_url=data.get("html_url"),
        )


class GitHubClient:
    """Thin GitHub REST v3 client bound to one host configuration.

    Every failure is logged and re-raised as ``HostingApiError``; callers do
    not retry.
    """

    def __init__(self, host_config: HostConfig, timeout: int = 30):
        self.host_config = host_config
        self.base_url = host_config.api_endpoint.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"token {self.host_config.access_token}",
            "Accept": "application/vnd.github+json",
        }

    def _request(self, method: str, path: str, operation: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}" if path.startswith("/") else path
        try:
            resp = requests.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as e:
            status_code = None
            resp_preview = None
            if getattr(e, "response", None) is not None:
                status_code = e.response.status_code
                resp_preview = (e.response.text or "")[:500]
            log_error(f"GitHub {operation} failed", error=str(e), status_code=status_code, response=resp_preview)
            raise HostingApiError(f"GitHub {operation} failed: {e}", status_code=status_code) from e
        return resp

    def _json(self, method: str, path: str, operation: str, **kwargs) -> Any:
        resp = self._request(method, path, operation, **kwargs)
        data = resp.json() if resp.content else None
        log_api_response(operation, resp.status_code, data if isinstance(data, dict) else None)
        return data

    def _paginate(self, path: str, operation: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        url: Optional[str] = path
        query = {"per_page": 100, **(params or {})}
        while url:
            resp = self._request("GET", url, operation, params=query)
            log_api_response(operation, resp.status_code)
            items.extend(resp.json() or [])
            # The next link already carries the query string
            url = (resp.links or {}).get("next", {}).get("url")
            query = None
        return items

    def current_user_login(self) -> str:
        data = self._json("GET", "/user", "user lookup")
        return data["login"]

    def list_pull_requests(self, repo: RepositoryCoordinates) -> List[PullRequest]:
        """Open pull requests of ``repo``, all pages."""
        raw = self._paginate(f"/repos/{repo.full_name}/pulls", "pull request listing", {"state": "open"})
        return [PullRequest.from_api(item) for item in raw]

    def create_pull_request(self, repo: RepositoryCoordinates, base: str, head: str, title: str,
                            body: Optional[str] = None) -> PullRequest:
        payload: Dict[str, Any] = {"base": base, "head": head, "title": title}
        if body is not None:
            payload["body"] = body
        data = self._json("POST", f"/repos/{repo.full_name}/pulls", "pull request creation", json=payload)
        return PullRequest.from_api(data)

    def update_pull_request_body(self, repo: RepositoryCoordinates, number: int, body: str) -> None:
        self._json("PATCH", f"/repos/{repo.full_name}/pulls/{number}", "pull request update", json={"body": body})

    def add_labels(self, repo: RepositoryCoordinates, number: int, labels: Sequence[str]) -> None:
        self._json("POST", f"/repos/{repo.full_name}/issues/{number}/labels", "label addition",
                   json={"labels": list(labels)})

    def add_assignees(self, repo: RepositoryCoordinates, number: int, assignees: Sequence[str]) -> None:
        self._json("POST", f"/repos/{repo.full_name}/issues/{number}/assignees", "assignee addition",
                   json={"assignees": list(assignees)})

    def request_reviewers(self, repo: RepositoryCoordinates, number: int, reviewers: Sequence[str]) -> None:
        self._json("POST", f"/repos/{repo.full_name}/pulls/{number}/requested_reviewers", "review request",
                   json={"reviewers": list(reviewers)})

    def pull_request_files(self, repo: RepositoryCoordinates, number: int) -> List[Dict[str, Any]]:
        """Changed files of a pull request, each with ``filename`` and ``patch``."""
        return self._paginate(f"/repos/{repo.full_name}/pulls/{number}/files", "pull request files")

    def file_content(self, repo: RepositoryCoordinates, path: str, ref: str) -> str:
        """Text of ``path`` at ``ref`` (branch name or SHA)."""
        data = self._json("GET", f"/repos/{repo.full_name}/contents/{path}", "file content",
                          params={"ref": ref})
        return base64.b64decode(data.get("content") or "").decode("utf-8")
