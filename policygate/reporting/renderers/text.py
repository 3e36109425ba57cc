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

from typing import Literal

from policygate.reporting.types import Report, Severity, Violation

Verbosity = Literal["quiet", "normal", "verbose"]

_STATUS_MARK = {"pass": "✓", "warn": "!", "fail": "✗"}


class TextReportRenderer:
    """
    Human-readable CLI output. Pure rendering: does not sort or mutate.

    Verbosity levels:
    - quiet: one-line summary only
    - normal: summary + violations with remediation
    - verbose: everything (header, threshold, context)
    """

    def __init__(self, verbosity: Verbosity = "normal"):
        self.verbosity = verbosity

    def render(self, report: Report) -> str:
        if self.verbosity == "quiet":
            return self._summary_line(report) + "\n"

        lines: list[str] = []
        if self.verbosity == "verbose":
            lines.append(f"{report.tool} {report.version}")
            if report.config_path:
                lines.append(f"config: {report.config_path}")
            lines.append(f"fail_on: {report.fail_threshold.value}")
            lines.append("")

        lines.append(self._summary_line(report))
        lines.append("")

        for v in report.violations:
            lines.extend(self._render_violation(v))

        return "\n".join(lines).rstrip() + "\n"

    def _summary_line(self, report: Report) -> str:
        mark = _STATUS_MARK[report.status]
        if not report.violations:
            return f"{mark} No violations"

        counts = report.by_severity()
        sev_parts = [f"{counts[s.value]} {s.value}" for s in Severity.ordered() if counts.get(s.value)]
        verdict = "failing" if report.verdict.failing else "not failing"
        return f"{mark} {len(report.violations)} violations ({', '.join(sev_parts)}) [{report.status}, {verdict}]"

    def _render_violation(self, v: Violation) -> list[str]:
        out = [f"  ✗ {v.severity.value.upper()} [{v.rule_id}]", f"    {v.message}"]

        if v.remediation:
            out.append(f"    fix: {v.remediation}")

        if self.verbosity == "verbose" and v.context:
            for k in sorted(v.context.keys()):
                out.append(f"    {k}: {v.context[k]!r}")

        return out
