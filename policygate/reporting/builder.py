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
from typing import Any

from policygate import POLICYGATE_VERSION
from policygate.core.engine import EvaluationResult
from policygate.reporting.types import Report


class DefaultReportBuilder:
    """
    Build a Report from an EvaluationResult.

    Violation order is kept exactly as evaluated; renderers and tests
    rely on it.
    """

    def __init__(self, *, tool: str = "policygate", version: str = POLICYGATE_VERSION) -> None:
        self._tool = tool
        self._version = version

    def build(
        self,
        result: EvaluationResult,
        *,
        config_path: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Report:
        return Report(
            tool=self._tool,
            version=self._version,
            verdict=result.verdict,
            violations=tuple(result.violations),
            config_path=config_path,
            metadata=dict(metadata or {}),
        )
