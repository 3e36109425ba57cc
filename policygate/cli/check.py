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

import logging
import os
import sys
from pathlib import Path

from policygate.cli._io import (
    display_path,
    ensure_repo_root,
    read_optional_bytes,
    repo_file_exists,
    resolve_config_file,
)
from policygate.cli.exitcodes import EXIT_OK, exit_code_from_verdict
from policygate.config.loader import DefaultPolicyConfigLoader
from policygate.core.engine import DefaultPolicyEvaluator
from policygate.lockfile.reader import DEFAULT_LOCKFILE
from policygate.reporting.builder import DefaultReportBuilder
from policygate.reporting.renderers.github import COMMENT_MARKER, GitHubReportRenderer
from policygate.reporting.renderers.json import JsonReportRenderer
from policygate.reporting.renderers.text import TextReportRenderer
from policygate.vcs.github import DEFAULT_API_URL, GitHubClient, GitHubEventContext, require_token

logger = logging.getLogger(__name__)


def run(
    *,
    path: str,
    config: str | None,
    title: str | None,
    lockfile: str | None,
    fmt: str,
    fail_on: str | None,
    comment: bool,
    verbosity: str = "normal",
) -> int:
    """
    Evaluate the repository policy for one pull request.

    Loads the policy file, gathers the PR title, file-existence facts and the
    lock manifest, evaluates, prints the report and optionally upserts the
    PR comment.
    """
    repo_root = ensure_repo_root(path)

    event = GitHubEventContext.from_env()
    if comment:
        # fail before doing any work when the credential is missing
        token = require_token()
        if event is None or event.pull_request is None or not event.repository:
            print("policygate: not a pull request event; skipping comment", file=sys.stderr)
            return EXIT_OK

    config_file = resolve_config_file(repo_root, config or os.environ.get("INPUT_CONFIG_PATH"))
    policy = DefaultPolicyConfigLoader().load(config_file)
    config_display = display_path(repo_root, config_file)
    if policy is None:
        logger.warning("No policy file at %s; nothing enforced", config_display)

    if title is None:
        title = event.pull_request.title if event is not None and event.pull_request is not None else ""

    lockfile_name = lockfile or (policy.lockfile if policy is not None else DEFAULT_LOCKFILE)
    lockfile_path = Path(repo_root) / lockfile_name

    result = DefaultPolicyEvaluator().evaluate(
        policy,
        pr_title=title,
        file_exists=repo_file_exists(repo_root),
        manifest=read_optional_bytes(lockfile_path),
        manifest_source=display_path(repo_root, lockfile_path),
        fail_on=fail_on,
    )

    report = DefaultReportBuilder().build(result, config_path=config_display)

    if fmt == "json":
        out = JsonReportRenderer().render(report)
    elif fmt == "github":
        out = GitHubReportRenderer().render(report)
    else:
        out = TextReportRenderer(verbosity=verbosity).render(report)  # type: ignore[arg-type]
    print(out, end="")

    if comment:
        body = GitHubReportRenderer().render(report)
        api_url = os.environ.get("GITHUB_API_URL") or DEFAULT_API_URL
        with GitHubClient(token, api_url=api_url) as client:
            client.upsert_comment(event.repository, event.pull_request.number, body, marker=COMMENT_MARKER)

    if result.verdict.failing:
        print(f"policygate: policy check failed (fail_on={result.verdict.threshold.value})", file=sys.stderr)

    return exit_code_from_verdict(result.verdict)
