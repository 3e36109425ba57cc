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

from collections.abc import Mapping
from dataclasses import dataclass, field

from policygate.lockfile.reader import DEFAULT_LOCKFILE

DEFAULT_CONFIG_FILE = ".repo-policy.yml"


@dataclass(frozen=True)
class PolicyConfig:
    """
    Parsed repository policy. Every field is optional; an empty
    PolicyConfig enforces nothing.
    """

    title_regex: str | None = None
    required_files: tuple[str, ...] = ()
    denylist: tuple[str, ...] = ()
    severity_overrides: Mapping[str, str] = field(default_factory=dict)
    fail_on: str | None = None
    lockfile: str = DEFAULT_LOCKFILE
