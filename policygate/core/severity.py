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

from collections.abc import Iterable, Mapping
from typing import Any

from policygate.reporting.types import PolicyStatus, Severity, Verdict, Violation


def apply_overrides(overrides: Mapping[str, Any] | None, violations: Iterable[Violation]) -> tuple[Violation, ...]:
    """
    Replace the severity of every violation whose rule id has an override.

    Order, messages and rule ids are untouched.
    """
    if not overrides:
        return tuple(violations)

    out: list[Violation] = []
    for v in violations:
        if v.rule_id in overrides:
            v = v.with_severity(Severity.normalize(overrides[v.rule_id]))
        out.append(v)
    return tuple(out)


def should_fail(threshold: Any, violations: Iterable[Violation]) -> bool:
    """True when any violation ranks at or above the (normalized) threshold."""
    limit = Severity.normalize(threshold).rank
    return any(v.severity.rank >= limit for v in violations)


def compute_status(threshold: Any, violations: Iterable[Violation]) -> PolicyStatus:
    """
    - pass: no violations
    - fail: an ERROR violation exists and the threshold triggers failure
    - warn: anything else
    """
    items = tuple(violations)
    if not items:
        return "pass"
    if should_fail(threshold, items) and any(v.severity == Severity.ERROR for v in items):
        return "fail"
    return "warn"


def compute_verdict(threshold: Any, violations: Iterable[Violation]) -> Verdict:
    items = tuple(violations)
    return Verdict(
        status=compute_status(threshold, items),
        failing=should_fail(threshold, items),
        threshold=Severity.normalize(threshold),
    )
