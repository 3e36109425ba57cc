# SPDX-License-Identifier: AGPL-3.0-only
#
# Copyright (c) 2026 Policygate Contributors
#
# This file is part of Policygate.
#
# Policygate is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 only.
#
# Policygate is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.
# See the GNU Affero General Public License for more details.

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
_PAGE_SIZE = 100


class GitHubAPIError(Exception):
    """Raised when the GitHub REST API answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"GitHub API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class MissingCredentialError(Exception):
    """Raised when a required credential is not present in the environment."""


def require_token(env: Mapping[str, str] | None = None, name: str = "GITHUB_TOKEN") -> str:
    env = os.environ if env is None else env
    token = env.get(name, "")
    if not token:
        raise MissingCredentialError(f"{name} missing")
    return token


# Event context


@dataclass(frozen=True, slots=True)
class PullRequestInfo:
    number: int
    title: str


@dataclass(frozen=True, slots=True)
class GitHubEventContext:
    """
    The parts of a GitHub Actions run the gate cares about.

    `pull_request` is None for non-PR events.
    """

    repository: str | None
    event_name: str | None = None
    pull_request: PullRequestInfo | None = None

    @staticmethod
    def from_payload(
        payload: Mapping[str, Any],
        *,
        repository: str | None = None,
        event_name: str | None = None,
    ) -> "GitHubEventContext":
        if repository is None:
            repo = payload.get("repository")
            if isinstance(repo, Mapping) and isinstance(repo.get("full_name"), str):
                repository = repo["full_name"]

        pr = payload.get("pull_request")
        info: PullRequestInfo | None = None
        if isinstance(pr, Mapping) and isinstance(pr.get("number"), int):
            title = pr.get("title")
            info = PullRequestInfo(number=pr["number"], title=title if isinstance(title, str) else "")

        return GitHubEventContext(repository=repository, event_name=event_name, pull_request=info)

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "GitHubEventContext | None":
        """
        Read GITHUB_EVENT_PATH / GITHUB_REPOSITORY / GITHUB_EVENT_NAME.

        Returns None when not running inside GitHub Actions.
        """
        env = os.environ if env is None else env
        event_path = env.get("GITHUB_EVENT_PATH")
        if not event_path:
            return None

        path = Path(event_path)
        if not path.is_file():
            logger.warning("GITHUB_EVENT_PATH points to a missing file: %s", path)
            return None

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Could not parse event payload: %s", path)
            return None

        if not isinstance(payload, Mapping):
            return None

        return GitHubEventContext.from_payload(
            payload,
            repository=env.get("GITHUB_REPOSITORY") or None,
            event_name=env.get("GITHUB_EVENT_NAME") or None,
        )


# REST client


class GitHubClient:
    """
    Minimal GitHub REST client for the single policy comment.

    Pass `client` to inject a preconfigured httpx.Client (tests use
    httpx.MockTransport).
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._client = client or httpx.Client(timeout=timeout)
        self._api_url = api_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = self._client.request(method, f"{self._api_url}{path}", headers=self._headers, **kwargs)
        if response.status_code >= 400:
            raise GitHubAPIError(response.status_code, response.text)
        return response

    def list_comments(self, repo: str, issue_number: int) -> list[dict[str, Any]]:
        comments: list[dict[str, Any]] = []
        page = 1
        while True:
            response = self._request(
                "GET",
                f"/repos/{repo}/issues/{issue_number}/comments",
                params={"per_page": _PAGE_SIZE, "page": page},
            )
            batch = response.json()
            if not isinstance(batch, list):
                break
            comments.extend(c for c in batch if isinstance(c, dict))
            if len(batch) < _PAGE_SIZE:
                break
            page += 1
        return comments

    def create_comment(self, repo: str, issue_number: int, body: str) -> dict[str, Any]:
        response = self._request("POST", f"/repos/{repo}/issues/{issue_number}/comments", json={"body": body})
        return response.json()

    def update_comment(self, repo: str, comment_id: int, body: str) -> dict[str, Any]:
        response = self._request("PATCH", f"/repos/{repo}/issues/comments/{comment_id}", json={"body": body})
        return response.json()

    def upsert_comment(self, repo: str, issue_number: int, body: str, *, marker: str) -> dict[str, Any]:
        """
        Update the first comment containing `marker`, or create a new one.
        """
        for comment in self.list_comments(repo, issue_number):
            if marker in (comment.get("body") or ""):
                logger.info("Updating policy comment %s on %s#%d", comment["id"], repo, issue_number)
                return self.update_comment(repo, comment["id"], body)

        logger.info("Creating policy comment on %s#%d", repo, issue_number)
        return self.create_comment(repo, issue_number, body)
