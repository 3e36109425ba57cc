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

from dataclasses import dataclass

from policygate.lockfile.types import DependencyRecord

# Stable rule identifiers. These are the keys accepted by the `severity`
# override map and the ids shown in reports.

CONFIG_MISSING = "config_missing"
TITLE_REGEX_INVALID = "title_regex_invalid"
PR_TITLE_REGEX = "pr_title_regex"
REQUIRED_FILES = "required_files"
DEPENDENCY_DENYLIST = "dependency_denylist"
DEPENDENCY_DENYLIST_INVALID = "dependency_denylist_invalid"
PACKAGE_LOCK_MISSING = "package_lock_missing"

RULE_IDS: tuple[str, ...] = (
    CONFIG_MISSING,
    TITLE_REGEX_INVALID,
    PR_TITLE_REGEX,
    REQUIRED_FILES,
    DEPENDENCY_DENYLIST,
    DEPENDENCY_DENYLIST_INVALID,
    PACKAGE_LOCK_MISSING,
)

# Separates a package name from its version range: "lodash@<4.17.21".
DENY_RULE_SEPARATOR = "@"


@dataclass(frozen=True, slots=True)
class DenyRule:
    """
    A parsed denylist entry.

    `range` is None when every version of `name` is banned.
    """

    raw: str
    name: str
    range: str | None = None

    @property
    def bans_all_versions(self) -> bool:
        return self.range is None


@dataclass(frozen=True, slots=True)
class DenylistMatch:
    dependency: DependencyRecord
    rule: DenyRule

    def describe(self) -> str:
        return f"{self.dependency} (rule: {self.rule.raw})"
