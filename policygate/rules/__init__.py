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

from policygate.rules.compiler import CompiledRules, compile_violations, config_missing_violation
from policygate.rules.denylist import DependencyDenylistEvaluator, parse_deny_rule
from policygate.rules.errors import RangeSyntaxError, RulesError
from policygate.rules.ranges import Comparator, VersionRange, coerce_version, is_valid_range, parse_range, satisfies
from policygate.rules.types import (
    CONFIG_MISSING,
    DENY_RULE_SEPARATOR,
    DEPENDENCY_DENYLIST,
    DEPENDENCY_DENYLIST_INVALID,
    PACKAGE_LOCK_MISSING,
    PR_TITLE_REGEX,
    REQUIRED_FILES,
    RULE_IDS,
    TITLE_REGEX_INVALID,
    DenylistMatch,
    DenyRule,
)

__all__ = [
    # Rule ids
    "CONFIG_MISSING",
    "TITLE_REGEX_INVALID",
    "PR_TITLE_REGEX",
    "REQUIRED_FILES",
    "DEPENDENCY_DENYLIST",
    "DEPENDENCY_DENYLIST_INVALID",
    "PACKAGE_LOCK_MISSING",
    "RULE_IDS",
    # Types
    "DENY_RULE_SEPARATOR",
    "DenyRule",
    "DenylistMatch",
    # Compiling
    "CompiledRules",
    "compile_violations",
    "config_missing_violation",
    # Denylist
    "parse_deny_rule",
    "DependencyDenylistEvaluator",
    # Ranges
    "Comparator",
    "VersionRange",
    "parse_range",
    "is_valid_range",
    "coerce_version",
    "satisfies",
    # Errors
    "RulesError",
    "RangeSyntaxError",
]
