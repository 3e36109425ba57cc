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

from policygate.reporting.types import Verdict

# CI-friendly semantics
EXIT_OK = 0
EXIT_POLICY_FAILURE = 1
EXIT_ENGINE_ERROR = 2


def exit_code_from_verdict(verdict: Verdict) -> int:
    """
    Policy:
      - failing verdict => EXIT_POLICY_FAILURE
      - else EXIT_OK (warnings below the threshold never fail)
    """
    return EXIT_POLICY_FAILURE if verdict.failing else EXIT_OK
