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

import json
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from policygate.lockfile.types import DependencyRecord, LockManifest, ManifestSchema

logger = logging.getLogger(__name__)

DEFAULT_LOCKFILE = "package-lock.json"

_INSTALL_PREFIX = "node_modules/"

ExtractionStrategy = Callable[[Mapping[str, Any]], Iterator[DependencyRecord]]


# Extraction strategies


def iter_flat_registry(packages: Mapping[str, Any]) -> Iterator[DependencyRecord]:
    """
    Flat registry form (lockfile v2/v3 "packages").

    Keys are installation paths such as "node_modules/a/node_modules/@s/b".
    The root project entry (key "") is not a dependency.
    """
    for install_path, entry in packages.items():
        if not install_path or not isinstance(entry, Mapping):
            continue

        version = entry.get("version")
        if not isinstance(version, str) or not version:
            continue

        name = entry.get("name")
        if not isinstance(name, str) or not name:
            name = _name_from_install_path(install_path)
        if not name:
            continue

        yield DependencyRecord(name=name, version=version)


def iter_dependency_tree(dependencies: Mapping[str, Any]) -> Iterator[DependencyRecord]:
    """
    Recursive tree form (lockfile v1 "dependencies").

    Walked depth-first in document order with an explicit stack, so
    nesting depth is unbounded.
    """
    stack: list[tuple[str, Any]] = list(reversed(list(dependencies.items())))

    while stack:
        name, entry = stack.pop()
        if not isinstance(entry, Mapping):
            continue

        version = entry.get("version")
        if isinstance(name, str) and name and isinstance(version, str) and version:
            yield DependencyRecord(name=name, version=version)

        nested = entry.get("dependencies")
        if isinstance(nested, Mapping):
            stack.extend(reversed(list(nested.items())))


def _name_from_install_path(install_path: str) -> str:
    _, sep, tail = install_path.rpartition(_INSTALL_PREFIX)
    return tail if sep else install_path


# Selection: first present, non-empty section wins
_STRATEGIES: tuple[tuple[ManifestSchema, ExtractionStrategy], ...] = (
    ("packages", iter_flat_registry),
    ("dependencies", iter_dependency_tree),
)


def _dedupe(records: Iterator[DependencyRecord]) -> tuple[DependencyRecord, ...]:
    return tuple(dict.fromkeys(records))


# Reader


@dataclass(frozen=True, slots=True)
class DefaultLockManifestReader:
    """
    Parses a dependency lock manifest into deduplicated DependencyRecords.

    Accepts raw content only; `read_file` is a thin convenience for the CLI.
    """

    encoding: str = "utf-8"

    def read(self, content: str | bytes | None, *, source: str | None = None) -> LockManifest:
        if content is None:
            return LockManifest.missing(source)

        if isinstance(content, bytes):
            try:
                content = content.decode(self.encoding)
            except UnicodeDecodeError as e:
                return LockManifest.invalid(f"not {self.encoding} text: {e}", source)

        try:
            data = json.loads(content)
        except (ValueError, RecursionError) as e:
            return LockManifest.invalid(f"not valid JSON: {e}", source)

        if not isinstance(data, Mapping):
            return LockManifest.invalid("manifest root must be an object", source)

        for schema, strategy in _STRATEGIES:
            section = data.get(schema)
            if isinstance(section, Mapping) and section:
                records = _dedupe(strategy(section))
                logger.debug("read %d dependencies from '%s' section of %s", len(records), schema, source)
                return LockManifest(records=records, schema=schema, source=source)

        return LockManifest(records=(), source=source)

    def read_file(self, path: str | Path) -> LockManifest:
        path = Path(path)
        if not path.is_file():
            return LockManifest.missing(str(path))
        return self.read(path.read_bytes(), source=str(path))
