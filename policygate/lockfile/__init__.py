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

from policygate.lockfile.reader import (
    DEFAULT_LOCKFILE,
    DefaultLockManifestReader,
    iter_dependency_tree,
    iter_flat_registry,
)
from policygate.lockfile.types import DependencyRecord, LockManifest, ManifestAbsence, ManifestSchema

__all__ = [
    "DEFAULT_LOCKFILE",
    "DependencyRecord",
    "LockManifest",
    "ManifestAbsence",
    "ManifestSchema",
    "DefaultLockManifestReader",
    "iter_flat_registry",
    "iter_dependency_tree",
]
