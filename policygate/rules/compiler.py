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

import re
from collections.abc import Callable
from dataclasses import dataclass

from policygate.core.config import PolicyConfig
from policygate.reporting.types import Severity, Violation
from policygate.rules.types import CONFIG_MISSING, PR_TITLE_REGEX, REQUIRED_FILES, TITLE_REGEX_INVALID

FileExists = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class CompiledRules:
    """
    Violations from the title and required-files rules.

    `halted` means later rule categories must not run.
    """

    violations: tuple[Violation, ...] = ()
    halted: bool = False


def config_missing_violation() -> Violation:
    return Violation(
        rule_id=CONFIG_MISSING,
        severity=Severity.WARN,
        message="No policy configuration found. Nothing enforced.",
        remediation="Add a `.repo-policy.yml` at the repository root.",
    )


def compile_violations(
    config: PolicyConfig | None,
    pr_title: str,
    file_exists: FileExists,
) -> CompiledRules:
    """
    Evaluate the configuration-level rules in order:

    1. no config           -> config_missing, stop
    2. bad title pattern   -> title_regex_invalid, stop
    3. title mismatch      -> pr_title_regex
    4. missing files       -> required_files (one violation for all paths)
    """
    if config is None:
        return CompiledRules(violations=(config_missing_violation(),), halted=True)

    out: list[Violation] = []

    if config.title_regex is not None:
        try:
            pattern = re.compile(config.title_regex)
        except (re.error, OverflowError, RecursionError) as e:
            v = Violation(
                rule_id=TITLE_REGEX_INVALID,
                severity=Severity.ERROR,
                message=f"Configured title pattern `{config.title_regex}` does not compile: {e}.",
                remediation="Fix `pull_request.title_regex` in the policy file.",
                context={"pattern": config.title_regex, "error": str(e)},
            )
            return CompiledRules(violations=(v,), halted=True)

        title = pr_title or ""
        if pattern.search(title) is None:
            out.append(
                Violation(
                    rule_id=PR_TITLE_REGEX,
                    severity=Severity.ERROR,
                    message=f"PR title `{title}` does not match required pattern `{config.title_regex}`.",
                    remediation="Rename the pull request so its title matches the pattern.",
                    context={"pattern": config.title_regex, "title": title},
                )
            )

    if config.required_files:
        missing = [p for p in config.required_files if not file_exists(p)]
        if missing:
            listed = ", ".join(f"`{p}`" for p in missing)
            out.append(
                Violation(
                    rule_id=REQUIRED_FILES,
                    severity=Severity.ERROR,
                    message=f"Required files missing: {listed}.",
                    remediation="Add the missing files at the repository root.",
                    context={"missing": missing},
                )
            )

    return CompiledRules(violations=tuple(out))
