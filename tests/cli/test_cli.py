"""Tests for the policygate CLI."""

import json
from unittest.mock import patch

import pytest
from policygate.cli.exitcodes import EXIT_ENGINE_ERROR, EXIT_OK, EXIT_POLICY_FAILURE
from policygate.cli.main import main
from policygate.reporting.renderers.github import COMMENT_MARKER


@pytest.fixture(autouse=True)
def _no_actions_env(monkeypatch):
    for name in ("GITHUB_EVENT_PATH", "GITHUB_REPOSITORY", "GITHUB_TOKEN", "INPUT_CONFIG_PATH"):
        monkeypatch.delenv(name, raising=False)


def make_repo(tmp_path, policy: str | None = None, files=(), lock: dict | None = None):
    repo = tmp_path / "repo"
    repo.mkdir()
    if policy is not None:
        (repo / ".repo-policy.yml").write_text(policy, encoding="utf-8")
    for name in files:
        (repo / name).write_text("x", encoding="utf-8")
    if lock is not None:
        (repo / "package-lock.json").write_text(json.dumps(lock), encoding="utf-8")
    return repo


def write_event(tmp_path, monkeypatch, payload: dict):
    event = tmp_path / "event.json"
    event.write_text(json.dumps(payload), encoding="utf-8")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
    monkeypatch.setenv("GITHUB_REPOSITORY", "o/r")


class TestCheckCommand:
    """Tests for `policygate check`."""

    def test_missing_config_warns_and_passes(self, tmp_path, capsys):
        repo = make_repo(tmp_path)

        exit_code = main(["check", str(repo), "--title", "feat: x"])

        assert exit_code == EXIT_OK
        assert "[config_missing]" in capsys.readouterr().out

    def test_title_mismatch_fails(self, tmp_path, capsys):
        repo = make_repo(tmp_path, policy='pull_request:\n  title_regex: "^feat:"\n')

        exit_code = main(["check", str(repo), "--title", "fix: nope"])

        assert exit_code == EXIT_POLICY_FAILURE
        assert "[pr_title_regex]" in capsys.readouterr().out

    def test_all_policies_pass(self, tmp_path, capsys):
        repo = make_repo(
            tmp_path,
            policy="files:\n  required: [README.md]\ndependencies:\n  denylist: ['lodash@<4.17.21']\n",
            files=("README.md",),
            lock={"lockfileVersion": 3, "packages": {"node_modules/lodash": {"version": "4.17.21"}}},
        )

        exit_code = main(["check", str(repo), "--title", "anything"])

        assert exit_code == EXIT_OK
        assert capsys.readouterr().out == "✓ No violations\n"

    def test_json_output(self, tmp_path, capsys):
        repo = make_repo(
            tmp_path,
            policy="dependencies:\n  denylist: ['lodash@<4.17.21']\n",
            lock={"lockfileVersion": 1, "dependencies": {"lodash": {"version": "4.17.20"}}},
        )

        exit_code = main(["check", str(repo), "--format", "json"])
        data = json.loads(capsys.readouterr().out)

        assert exit_code == EXIT_POLICY_FAILURE
        assert data["status"] == "fail"
        assert data["config_path"] == ".repo-policy.yml"
        assert [v["rule_id"] for v in data["violations"]] == ["dependency_denylist"]

    def test_missing_lockfile_warns(self, tmp_path, capsys):
        repo = make_repo(tmp_path, policy="dependencies:\n  denylist: [left-pad]\n")

        exit_code = main(["check", str(repo), "--format", "json"])
        data = json.loads(capsys.readouterr().out)

        assert exit_code == EXIT_OK
        assert data["status"] == "warn"
        assert data["violations"][0]["rule_id"] == "package_lock_missing"
        assert "package-lock.json" in data["violations"][0]["message"]

    def test_fail_on_warn(self, tmp_path):
        repo = make_repo(tmp_path, policy="files:\n  required: [LICENSE]\nseverity:\n  required_files: warn\n")

        assert main(["check", str(repo)]) == EXIT_OK
        assert main(["check", str(repo), "--fail-on", "warn"]) == EXIT_POLICY_FAILURE

    def test_custom_config_path(self, tmp_path, capsys):
        repo = make_repo(tmp_path)
        (repo / "policy.yml").write_text("files:\n  required: [NOTICE]\n", encoding="utf-8")

        exit_code = main(["check", str(repo), "--config", "policy.yml", "--format", "json"])
        data = json.loads(capsys.readouterr().out)

        assert exit_code == EXIT_POLICY_FAILURE
        assert data["config_path"] == "policy.yml"

    def test_github_format_has_marker(self, tmp_path, capsys):
        repo = make_repo(tmp_path, policy="{}\n")

        main(["check", str(repo), "--format", "github"])

        assert capsys.readouterr().out.startswith(COMMENT_MARKER)

    def test_title_read_from_event(self, tmp_path, monkeypatch, capsys):
        repo = make_repo(tmp_path, policy='pull_request:\n  title_regex: "^feat:"\n')
        write_event(tmp_path, monkeypatch, {"pull_request": {"number": 3, "title": "feat: from event"}})

        assert main(["check", str(repo)]) == EXIT_OK

    def test_invalid_config_is_engine_error(self, tmp_path, capsys):
        repo = make_repo(tmp_path, policy="files: [unclosed\n")

        exit_code = main(["check", str(repo)])

        assert exit_code == EXIT_ENGINE_ERROR
        assert "policygate: error:" in capsys.readouterr().err

    def test_nonexistent_path_is_engine_error(self, tmp_path):
        assert main(["check", str(tmp_path / "nope")]) == EXIT_ENGINE_ERROR


class TestCommentMode:
    """Tests for `policygate check --comment`."""

    def test_missing_token_is_fatal(self, tmp_path, capsys):
        repo = make_repo(tmp_path, policy="{}\n")

        exit_code = main(["check", str(repo), "--comment"])

        assert exit_code == EXIT_ENGINE_ERROR
        assert "GITHUB_TOKEN missing" in capsys.readouterr().err

    def test_not_a_pr_event(self, tmp_path, monkeypatch, capsys):
        repo = make_repo(tmp_path, policy="{}\n")
        monkeypatch.setenv("GITHUB_TOKEN", "abc")
        write_event(tmp_path, monkeypatch, {"ref": "refs/heads/main"})

        with patch("policygate.cli.check.GitHubClient") as client_cls:
            exit_code = main(["check", str(repo), "--comment"])

        assert exit_code == EXIT_OK
        client_cls.assert_not_called()
        assert "not a pull request event" in capsys.readouterr().err

    def test_upserts_comment(self, tmp_path, monkeypatch):
        repo = make_repo(tmp_path, policy='pull_request:\n  title_regex: "^feat:"\n')
        monkeypatch.setenv("GITHUB_TOKEN", "abc")
        write_event(tmp_path, monkeypatch, {"pull_request": {"number": 9, "title": "fix: x"}})

        with patch("policygate.cli.check.GitHubClient") as client_cls:
            exit_code = main(["check", str(repo), "--comment"])

        assert exit_code == EXIT_POLICY_FAILURE
        client = client_cls.return_value.__enter__.return_value
        client.upsert_comment.assert_called_once()
        args, kwargs = client.upsert_comment.call_args
        assert args[0] == "o/r"
        assert args[1] == 9
        assert args[2].startswith(COMMENT_MARKER)
        assert "pr_title_regex" in args[2]
        assert kwargs["marker"] == COMMENT_MARKER
