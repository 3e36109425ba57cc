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
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from policygate.core.config import PolicyConfig
from policygate.lockfile.reader import DEFAULT_LOCKFILE
from policygate.rules.types import RULE_IDS

logger = logging.getLogger(__name__)


class ConfigLoadError(Exception):
    """
    Raised when a policy file exists but cannot be turned into a PolicyConfig.
    """

    def __init__(self, code: str, message: str, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass(frozen=True, slots=True)
class DefaultPolicyConfigLoader:
    """
    Loads a PolicyConfig from .repo-policy.yml / .yaml / .json.

    Returns None when the file does not exist: an absent policy is a
    meaningful state, not an error.
    """

    encoding: str = "utf-8"

    def load(self, path: str | Path) -> PolicyConfig | None:
        if not isinstance(path, Path):
            path = Path(path)

        if not path.is_file():
            logger.debug("no policy file at %s", path)
            return None

        data = self._read_config_file(path)

        # empty file == empty policy
        if data is None:
            return PolicyConfig()

        if not isinstance(data, dict):
            raise ConfigLoadError(code="invalid_config", message="Policy file root must be a mapping/object.")

        return self.from_dict(data)

    def from_dict(self, data: Mapping[str, Any]) -> PolicyConfig:
        pull_request = _section(data, "pull_request")
        files = _section(data, "files")
        dependencies = _section(data, "dependencies")

        lockfile = _optional_str(dependencies.get("lockfile"), "dependencies.lockfile") or DEFAULT_LOCKFILE

        return PolicyConfig(
            title_regex=_optional_str(pull_request.get("title_regex"), "pull_request.title_regex"),
            required_files=_str_list(files.get("required"), "files.required"),
            denylist=_str_list(dependencies.get("denylist"), "dependencies.denylist"),
            severity_overrides=self._parse_overrides(data.get("severity")),
            fail_on=_optional_str(data.get("fail_on"), "fail_on"),
            lockfile=lockfile,
        )

    def _read_config_file(self, path: Path) -> Any:
        try:
            raw = path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as e:
            raise ConfigLoadError(
                code="config_encoding_error",
                message=f"Failed to decode policy file (expected {self.encoding}): {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

        if path.suffix.lower() == ".json":
            try:
                return json.loads(raw) if raw.strip() else None
            except ValueError as e:
                raise ConfigLoadError(
                    code="config_parse_error",
                    message=f"Policy file is not valid JSON: {path}",
                    details={"path": str(path), "error": str(e)},
                ) from e

        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                code="config_parse_error",
                message=f"Policy file is not valid YAML: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

    def _parse_overrides(self, raw: Any) -> dict[str, str]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigLoadError(code="invalid_severity", message="'severity' must be a mapping of rule id to level.")

        out: dict[str, str] = {}
        for rule_id, level in raw.items():
            if not isinstance(rule_id, str) or not rule_id.strip():
                continue
            if rule_id.strip() not in RULE_IDS:
                logger.warning("Ignoring severity override for unknown rule id %r", rule_id)
                continue
            # unknown levels are kept; normalization fails closed to error
            out[rule_id.strip()] = "" if level is None else str(level)
        return out


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    raw = data.get(key)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(code=f"invalid_{key}", message=f"'{key}' must be a mapping/object.")
    return raw


def _optional_str(raw: Any, name: str) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, (dict, list)):
        raise ConfigLoadError(code="invalid_value", message=f"'{name}' must be a string.")
    return str(raw)


def _str_list(raw: Any, name: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw.strip(),) if raw.strip() else ()
    if not isinstance(raw, list):
        raise ConfigLoadError(code="invalid_value", message=f"'{name}' must be a list of strings.")
    return tuple(str(x).strip() for x in raw if x is not None and str(x).strip())
