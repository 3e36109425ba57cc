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

from policygate.reporting._json import dumps_deterministic
from policygate.reporting.types import Report


class JsonReportRenderer:
    """Deterministic machine-readable output."""

    def __init__(self, *, indent: int | None = None) -> None:
        self._indent = indent

    def render(self, report: Report) -> str:
        return dumps_deterministic(report.to_dict(), indent=self._indent) + "\n"
