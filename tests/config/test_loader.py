import json
from pathlib import Path

import pytest
from policygate.config.loader import ConfigLoadError, DefaultPolicyConfigLoader
from policygate.core.config import PolicyConfig


def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def load(path: Path) -> PolicyConfig | None:
    return DefaultPolicyConfigLoader().load(path)


# ----------------------------
# Loader: happy paths
# ----------------------------


def test_missing_file_is_none(tmp_path: Path):
    assert load(tmp_path / ".repo-policy.yml") is None


def test_empty_file_is_empty_policy(tmp_path: Path):
    assert load(write(tmp_path / ".repo-policy.yml", "")) == PolicyConfig()


def test_full_yaml(tmp_path: Path):
    f = write(
        tmp_path / ".repo-policy.yml",
        """
pull_request:
  title_regex: "^feat:"
files:
  required:
    - README.md
    - LICENSE
dependencies:
  lockfile: npm/package-lock.json
  denylist:
    - "lodash@<4.17.21"
    - "@scope/pkg"
severity:
  required_files: warn
  package_lock_missing: error
fail_on: warn
""",
    )
    cfg = load(f)

    assert cfg == PolicyConfig(
        title_regex="^feat:",
        required_files=("README.md", "LICENSE"),
        denylist=("lodash@<4.17.21", "@scope/pkg"),
        severity_overrides={"required_files": "warn", "package_lock_missing": "error"},
        fail_on="warn",
        lockfile="npm/package-lock.json",
    )


def test_json_policy(tmp_path: Path):
    f = write(tmp_path / "policy.json", json.dumps({"files": {"required": ["README.md"]}}))
    cfg = load(f)
    assert cfg is not None
    assert cfg.required_files == ("README.md",)
    assert cfg.lockfile == "package-lock.json"


def test_scalar_list_and_blank_entries(tmp_path: Path):
    f = write(
        tmp_path / ".repo-policy.yml",
        "files:\n  required: README.md\ndependencies:\n  denylist: ['left-pad', '', '  ']\n",
    )
    cfg = load(f)
    assert cfg.required_files == ("README.md",)
    assert cfg.denylist == ("left-pad",)


def test_null_severity_value_kept_as_empty(tmp_path: Path):
    f = write(tmp_path / ".repo-policy.yml", "severity:\n  required_files:\n")
    assert load(f).severity_overrides == {"required_files": ""}


# ----------------------------
# Loader: errors
# ----------------------------


def test_malformed_yaml(tmp_path: Path):
    f = write(tmp_path / ".repo-policy.yml", "pull_request: [unclosed\n")
    with pytest.raises(ConfigLoadError) as exc:
        load(f)
    assert exc.value.code == "config_parse_error"


def test_root_must_be_mapping(tmp_path: Path):
    with pytest.raises(ConfigLoadError) as exc:
        load(write(tmp_path / ".repo-policy.yml", "- a\n- b\n"))
    assert exc.value.code == "invalid_config"


def test_section_must_be_mapping(tmp_path: Path):
    with pytest.raises(ConfigLoadError) as exc:
        load(write(tmp_path / ".repo-policy.yml", "files: README.md\n"))
    assert exc.value.code == "invalid_files"


def test_list_must_be_list(tmp_path: Path):
    with pytest.raises(ConfigLoadError):
        load(write(tmp_path / ".repo-policy.yml", "dependencies:\n  denylist: {lodash: 1}\n"))


def test_severity_must_be_mapping(tmp_path: Path):
    with pytest.raises(ConfigLoadError) as exc:
        load(write(tmp_path / ".repo-policy.yml", "severity: warn\n"))
    assert exc.value.code == "invalid_severity"


def test_unknown_severity_rule_id_is_dropped(tmp_path: Path, caplog):
    f = write(tmp_path / ".repo-policy.yml", "severity:\n  required_files: warn\n  no_such_rule: warn\n")

    with caplog.at_level("WARNING", logger="policygate.config.loader"):
        cfg = load(f)

    assert cfg.severity_overrides == {"required_files": "warn"}
    assert "no_such_rule" in caplog.text
