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
from collections.abc import Sequence
from dataclasses import dataclass

from policygate.lockfile.types import LockManifest
from policygate.reporting.types import Severity, Violation
from policygate.rules.errors import RangeSyntaxError
from policygate.rules.ranges import VersionRange, coerce_version, parse_range
from policygate.rules.types import (
    DENY_RULE_SEPARATOR,
    DEPENDENCY_DENYLIST,
    DEPENDENCY_DENYLIST_INVALID,
    PACKAGE_LOCK_MISSING,
    DenylistMatch,
    DenyRule,
)

logger = logging.getLogger(__name__)


def parse_deny_rule(rule: str) -> DenyRule:
    """
    Split a denylist entry into package name and optional range.

    The split point is the LAST separator, so scoped names work:
      "lodash"              -> lodash, any version
      "lodash@<4.17.21"     -> lodash, <4.17.21
      "@scope/pkg"          -> @scope/pkg, any version
      "@scope/pkg@^1.0.0"   -> @scope/pkg, ^1.0.0
      "lodash@" / "lodash@ " -> lodash, any version
    """
    text = rule.strip()
    idx = text.rfind(DENY_RULE_SEPARATOR)

    if idx <= 0:
        return DenyRule(raw=rule, name=text)

    name = text[:idx].strip()
    range_text = text[idx + 1 :].strip()
    if not range_text:
        logger.warning(
            "deny rule '%s' has an empty version range; every version of '%s' is banned",
            rule,
            name,
        )
        return DenyRule(raw=rule, name=name)

    return DenyRule(raw=rule, name=name, range=range_text)


@dataclass(frozen=True, slots=True)
class _CompiledDenyRule:
    rule: DenyRule
    version_range: VersionRange | None

    def matches(self, name: str, version: str) -> bool:
        if name != self.rule.name:
            return False
        if self.version_range is None:
            return True
        coerced = coerce_version(version)
        if coerced is None:
            return False
        return self.version_range.satisfied_by(coerced)


@dataclass(frozen=True, slots=True)
class DependencyDenylistEvaluator:
    """
    Matches resolved dependencies against authored deny rules.

    Semantics:
    - every rule with a range is validated first; each invalid one yields
      a `dependency_denylist_invalid` violation
    - if ANY rule is invalid, no matching happens at all in this run
    - an absent/unparseable manifest yields `package_lock_missing` and
      likewise disables matching
    - all matches are aggregated into one `dependency_denylist` violation
    """

    missing_manifest_severity: Severity = Severity.WARN

    def evaluate(self, rules: Sequence[str], manifest: LockManifest) -> list[Violation]:
        if not rules:
            return []

        violations: list[Violation] = []
        compiled: list[_CompiledDenyRule] = []
        invalid = False

        for raw in rules:
            rule = parse_deny_rule(raw)
            if rule.range is None:
                compiled.append(_CompiledDenyRule(rule, None))
                continue
            try:
                compiled.append(_CompiledDenyRule(rule, parse_range(rule.range)))
            except RangeSyntaxError as e:
                invalid = True
                violations.append(_invalid_rule_violation(rule, e))

        if not manifest.available:
            violations.append(self._manifest_violation(manifest))

        if invalid or not manifest.available:
            return violations

        matches = [
            DenylistMatch(dependency=dep, rule=c.rule)
            for c in compiled
            for dep in manifest.records
            if c.matches(dep.name, dep.version)
        ]
        logger.debug(
            "denylist: %d rule(s), %d dependencies, %d match(es)",
            len(compiled),
            len(manifest.records),
            len(matches),
        )

        if matches:
            violations.append(_denylist_violation(matches))

        return violations

    def _manifest_violation(self, manifest: LockManifest) -> Violation:
        source = manifest.source or "lock manifest"
        if manifest.absence == "invalid":
            message = f"Dependency denylist is configured but `{source}` could not be parsed ({manifest.error})."
        else:
            message = f"Dependency denylist is configured but `{source}` was not found."
        return Violation(
            rule_id=PACKAGE_LOCK_MISSING,
            severity=self.missing_manifest_severity,
            message=message,
            remediation="Commit a valid package-lock.json so denied dependencies can be checked.",
            context={"reason": manifest.absence, "source": manifest.source},
        )


def _invalid_rule_violation(rule: DenyRule, error: RangeSyntaxError) -> Violation:
    return Violation(
        rule_id=DEPENDENCY_DENYLIST_INVALID,
        severity=Severity.ERROR,
        message=f"Invalid denylist rule `{rule.raw}`: {error}.",
        remediation="Fix the version range. Denylist enforcement is paused until every rule is valid.",
        context={"rule": rule.raw, "range": rule.range},
    )


def _denylist_violation(matches: Sequence[DenylistMatch]) -> Violation:
    listed = ", ".join(f"`{m.describe()}`" for m in matches)
    return Violation(
        rule_id=DEPENDENCY_DENYLIST,
        severity=Severity.ERROR,
        message=f"Denied dependencies found: {listed}.",
        remediation="Upgrade or remove the listed packages and regenerate the lock manifest.",
        context={
            "matches": [
                {"dependency": str(m.dependency), "rule": m.rule.raw}
                for m in matches
            ],
        },
    )
