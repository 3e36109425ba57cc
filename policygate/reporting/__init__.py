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

from policygate.reporting.renderers.github import COMMENT_MARKER, GitHubReportRenderer
from policygate.reporting.renderers.json import JsonReportRenderer
from policygate.reporting.renderers.text import TextReportRenderer
from policygate.reporting.types import PolicyStatus, Report, Severity, Verdict, Violation

__all__ = [
    "Severity",
    "PolicyStatus",
    "Violation",
    "Verdict",
    "Report",
    "COMMENT_MARKER",
    "GitHubReportRenderer",
    "JsonReportRenderer",
    "TextReportRenderer",
]
