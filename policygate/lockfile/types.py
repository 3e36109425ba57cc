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

from dataclasses import dataclass
from typing import Any, Literal

ManifestAbsence = Literal["missing", "invalid"]
ManifestSchema = Literal["packages", "dependencies"]


@dataclass(frozen=True, slots=True, order=True)
class DependencyRecord:
    """
    One resolved package at one version.

    Identity is the (name, version) pair; a name may appear several times
    at different versions.
    """

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True, slots=True)
class LockManifest:
    """
    Result of reading a lock manifest.

    Exactly one of these holds:
      - `absence` is None: `records` is the (possibly empty) dependency list
      - `absence` is "missing" / "invalid": nothing could be read
    """

    records: tuple[DependencyRecord, ...] = ()
    absence: ManifestAbsence | None = None
    schema: ManifestSchema | None = None
    source: str | None = None
    error: str | None = None

    @property
    def available(self) -> bool:
        return self.absence is None

    @staticmethod
    def missing(source: str | None = None) -> "LockManifest":
        return LockManifest(absence="missing", source=source)

    @staticmethod
    def invalid(error: str, source: str | None = None) -> "LockManifest":
        return LockManifest(absence="invalid", source=source, error=error)
