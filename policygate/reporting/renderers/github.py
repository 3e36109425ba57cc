from policygate.reporting.types import Report, Severity, Violation

# Identifies our comment among all PR comments so it can be updated in place.
COMMENT_MARKER = "<!-- repo-policy-gate -->"

_STATUS_LABEL = {
    "pass": "✅ Pass",
    "warn": "⚠️ Warn",
    "fail": "❌ Fail",
}


class GitHubReportRenderer:
    """
    Markdown output for the single upserted PR comment.

    The body always starts with COMMENT_MARKER.
    """

    def __init__(self, *, max_detail_items: int = 50) -> None:
        self._max_items = max_detail_items

    def render(self, report: Report) -> str:
        lines: list[str] = []

        lines.append(self._render_header(report))
        lines.append(self._render_summary(report))
        lines.append(self._render_violations(report))
        lines.append(self._render_footer(report))

        # Filter empty sections and join
        return "\n".join(s for s in lines if s) + "\n"

    def _render_header(self, report: Report) -> str:
        lines: list[str] = [COMMENT_MARKER, "### 🛡 Repo Policy Gate", ""]

        parts = [f"**Status:** {_STATUS_LABEL[report.status]}", f"**Fail on:** `{report.fail_threshold.value}`"]
        if report.config_path:
            parts.append(f"**Config:** `{report.config_path}`")
        lines.append(" | ".join(parts))
        lines.append("")

        return "\n".join(lines)

    def _render_summary(self, report: Report) -> str:
        if not report.violations:
            return "No policy violations. 🎉\n"

        counts = report.by_severity()
        rows = [[sev.value.capitalize(), str(counts[sev.value])] for sev in Severity.ordered() if counts.get(sev.value)]

        lines: list[str] = []
        lines.append(f"#### Violations ({len(report.violations)} total)")
        lines.append("")
        lines.append(_aligned_table(headers=["Severity", "Count"], rows=rows))
        lines.append("")
        return "\n".join(lines)

    def _render_violations(self, report: Report) -> str:
        if not report.violations:
            return ""

        shown = report.violations[: self._max_items]
        lines: list[str] = []
        for v in shown:
            lines.extend(self._render_violation_block(v))
            lines.append("")

        overflow = len(report.violations) - len(shown)
        if overflow > 0:
            lines.append(f"*… and {overflow} more.*")
            lines.append("")

        return "\n".join(lines)

    def _render_violation_block(self, v: Violation) -> list[str]:
        lines: list[str] = []
        lines.append(f"> **{v.severity.value.upper()}** `{v.rule_id}`")
        lines.append(f"> {v.message}")
        if v.remediation:
            lines.append(f"> *{v.remediation}*")
        return lines

    def _render_footer(self, report: Report) -> str:
        return f"---\n*Generated by policygate v{report.version}*"


def _aligned_table(headers: list[str], rows: list[list[str]]) -> str:
    """Render a Markdown table with columns padded to equal width."""
    col_count = len(headers)
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < col_count:
                widths[i] = max(widths[i], len(cell))

    def _fmt_row(cells: list[str]) -> str:
        parts = []
        for i, cell in enumerate(cells):
            parts.append(f" {cell:<{widths[i]}} ")
        return "|" + "|".join(parts) + "|"

    lines = [
        _fmt_row(headers),
        "|" + "|".join("-" * (w + 2) for w in widths) + "|",
    ]
    for row in rows:
        lines.append(_fmt_row(row))

    return "\n".join(lines)
