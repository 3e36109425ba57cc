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
from dataclasses import dataclass, field

from policygate.core.config import PolicyConfig
from policygate.core.severity import apply_overrides, compute_verdict
from policygate.lockfile.reader import DefaultLockManifestReader
from policygate.lockfile.types import LockManifest
from policygate.reporting.types import Verdict, Violation
from policygate.rules.compiler import FileExists, compile_violations
from policygate.rules.denylist import DependencyDenylistEvaluator

logger = logging.getLogger(__name__)


def _no_files(_: str) -> bool:
    return False


@dataclass(frozen=True)
class EvaluationResult:
    violations: tuple[Violation, ...]
    verdict: Verdict


# Default engine wiring


@dataclass(frozen=True)
class DefaultPolicyEvaluator:
    """
    Runs one policy evaluation. Pure: no I/O, no shared state.

    Order is fixed: config rules -> dependency denylist -> severity
    overrides -> verdict.
    """

    manifest_reader: DefaultLockManifestReader = field(default_factory=DefaultLockManifestReader)
    denylist_evaluator: DependencyDenylistEvaluator = field(default_factory=DependencyDenylistEvaluator)

    def evaluate(
        self,
        config: PolicyConfig | None,
        *,
        pr_title: str = "",
        file_exists: FileExists = _no_files,
        manifest: LockManifest | str | bytes | None = None,
        manifest_source: str | None = None,
        fail_on: str | None = None,
    ) -> EvaluationResult:
        """
        Evaluate `config` against the supplied facts.

        `manifest` is either raw lock manifest content (None when the file is
        absent) or an already-read LockManifest. `fail_on` overrides the
        configured threshold.
        """
        compiled = compile_violations(config, pr_title, file_exists)
        violations = list(compiled.violations)

        if not compiled.halted and config is not None and config.denylist:
            if not isinstance(manifest, LockManifest):
                manifest = self.manifest_reader.read(manifest, source=manifest_source or config.lockfile)
            violations.extend(self.denylist_evaluator.evaluate(config.denylist, manifest))

        overrides = config.severity_overrides if config is not None else None
        final = apply_overrides(overrides, violations)

        threshold = fail_on if fail_on is not None else (config.fail_on if config is not None else None)
        verdict = compute_verdict(threshold, final)

        logger.debug("evaluated %d violation(s): status=%s failing=%s", len(final), verdict.status, verdict.failing)
        return EvaluationResult(violations=final, verdict=verdict)


def evaluate(config: PolicyConfig | None, **facts) -> EvaluationResult:
    """
    Convenience helper using the default wiring.
    """
    return DefaultPolicyEvaluator().evaluate(config, **facts)
