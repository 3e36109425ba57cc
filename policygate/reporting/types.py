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
from dataclasses import dataclass, field, replace
from enum import StrEnum, auto
from typing import Any, Literal

# Severity enum


class Severity(StrEnum):
    """
    Severity level of a policy violation.

    Total order (weakest to strongest):
      WARN  → visible, fails only under a `warn` threshold
      ERROR → fails under the default threshold

    Normalization is fail-closed: anything that is not recognisably
    a warning becomes ERROR.
    """

    WARN = auto()
    ERROR = auto()

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @staticmethod
    def ordered() -> tuple["Severity", ...]:
        """
        Severity ordering from highest to lowest importance.
        """
        return (Severity.ERROR, Severity.WARN)

    @classmethod
    def normalize(cls, raw: Any) -> "Severity":
        """
        Map a raw config value to a Severity.

        "warn" / "warning" (case-insensitive) -> WARN, everything else,
        including None and empty strings, -> ERROR.
        """
        if isinstance(raw, Severity):
            return raw
        if isinstance(raw, str) and raw.strip().lower() in _WARN_ALIASES:
            return cls.WARN
        return cls.ERROR


_WARN_ALIASES = frozenset({"warn", "warning"})

_RANKS = {
    Severity.WARN: 1,
    Severity.ERROR: 2,
}


PolicyStatus = Literal["pass", "warn", "fail"]


# Violations


@dataclass(frozen=True, slots=True)
class Violation:
    """
    A single breach of a policy rule.

    `rule_id` is stable across runs; `context` carries the offending
    values in structured form for renderers and JSON output.
    """

    rule_id: str
    severity: Severity
    message: str
    remediation: str | None = None
    context: Mapping[str, Any] = field(default_factory=dict)

    def with_severity(self, severity: Severity) -> "Violation":
        return replace(self, severity=severity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "message": self.message,
            "remediation": self.remediation,
            "context": dict(self.context),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Violation":
        return Violation(
            rule_id=data["rule_id"],
            severity=Severity.normalize(data.get("severity")),
            message=data["message"],
            remediation=data.get("remediation"),
            context=dict(data.get("context", {})),
        )


# Verdict


@dataclass(frozen=True, slots=True)
class Verdict:
    """
    Outcome of one evaluation.

    `failing` drives the process exit code; `status` is what gets
    rendered for humans.
    """

    status: PolicyStatus
    failing: bool
    threshold: Severity = Severity.ERROR


# Final report object


@dataclass(frozen=True, slots=True)
class Report:
    """
    Everything the reporter needs to render and post a result.
    """

    tool: str
    version: str
    verdict: Verdict
    violations: tuple[Violation, ...] = ()
    config_path: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> PolicyStatus:
        return self.verdict.status

    @property
    def fail_threshold(self) -> Severity:
        return self.verdict.threshold

    def by_severity(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for v in self.violations:
            counts[v.severity.value] = counts.get(v.severity.value, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "version": self.version,
            "status": self.verdict.status,
            "failing": self.verdict.failing,
            "fail_threshold": self.verdict.threshold.value,
            "config_path": self.config_path,
            "violations": [v.to_dict() for v in self.violations],
            "metadata": dict(self.metadata),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Report":
        return Report(
            tool=data["tool"],
            version=data["version"],
            verdict=Verdict(
                status=data["status"],
                failing=bool(data.get("failing", False)),
                threshold=Severity.normalize(data.get("fail_threshold")),
            ),
            violations=tuple(Violation.from_dict(v) for v in data.get("violations", ())),
            config_path=data.get("config_path"),
            metadata=dict(data.get("metadata", {})),
        )
