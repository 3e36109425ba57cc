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

from collections.abc import Callable
from pathlib import Path

from policygate.core.config import DEFAULT_CONFIG_FILE


def ensure_repo_root(path: str) -> str:
    p = Path(path).resolve()
    if not p.exists():
        raise FileNotFoundError(f"Path does not exist: {p}")
    return str(p)


def resolve_config_file(repo_root: str, config: str | None) -> Path:
    candidate = Path(config) if config else Path(DEFAULT_CONFIG_FILE)
    return candidate if candidate.is_absolute() else Path(repo_root) / candidate


def display_path(repo_root: str, path: Path) -> str:
    try:
        return path.relative_to(repo_root).as_posix()
    except ValueError:
        return str(path)


def repo_file_exists(repo_root: str) -> Callable[[str], bool]:
    """Existence predicate for root-relative paths."""
    root = Path(repo_root)

    def exists(relative_path: str) -> bool:
        return (root / relative_path.lstrip("/")).exists()

    return exists


def read_optional_bytes(path: Path) -> bytes | None:
    return path.read_bytes() if path.is_file() else None
