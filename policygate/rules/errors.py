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


class RulesError(Exception):
    """
    Base class for all rules-related errors.

    These errors describe problems in authored policy definitions and are
    turned into violations by the evaluator, never surfaced as crashes.
    """

    code: str
    message: str
    details: Mapping[str, Any] | None = None

    def __init__(
        self,
        message: str,
        code: str = "rules_error",
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class RangeSyntaxError(RulesError):
    """Raised when a version range does not follow the npm range grammar."""

    def __init__(self, range_text: str, reason: str) -> None:
        super().__init__(
            message=f"invalid version range '{range_text}': {reason}",
            code="invalid_range",
            details={"range": range_text, "reason": reason},
        )
        self.range_text = range_text
