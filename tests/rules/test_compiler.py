import pytest
from policygate.core.config import PolicyConfig
from policygate.reporting.types import Severity
from policygate.rules.compiler import compile_violations
from policygate.rules.types import CONFIG_MISSING, PR_TITLE_REGEX, REQUIRED_FILES, TITLE_REGEX_INVALID


def exists_in(*paths: str):
    present = set(paths)
    return lambda p: p in present


class TestConfigMissing:
    def test_single_warning_and_halt(self):
        out = compile_violations(None, "feat: ok", exists_in())

        assert out.halted
        assert len(out.violations) == 1
        assert out.violations[0].rule_id == CONFIG_MISSING
        assert out.violations[0].severity == Severity.WARN

    def test_empty_config_enforces_nothing(self):
        out = compile_violations(PolicyConfig(), "", exists_in())
        assert out.violations == ()
        assert not out.halted


class TestTitleRegex:
    def test_invalid_pattern_halts(self):
        config = PolicyConfig(title_regex="(", required_files=("README.md",))
        out = compile_violations(config, "feat: ok", exists_in())

        assert out.halted
        assert [v.rule_id for v in out.violations] == [TITLE_REGEX_INVALID]
        assert out.violations[0].severity == Severity.ERROR

    @pytest.mark.parametrize("pattern", ["a{99999999999}", "(" * 2000 + ")" * 2000])
    def test_pattern_that_cannot_be_built_halts(self, pattern):
        config = PolicyConfig(title_regex=pattern, required_files=("README.md",))
        out = compile_violations(config, "feat: ok", exists_in())

        assert out.halted
        assert [v.rule_id for v in out.violations] == [TITLE_REGEX_INVALID]
        assert out.violations[0].context["pattern"] == pattern

    def test_mismatch(self):
        out = compile_violations(PolicyConfig(title_regex="^feat:"), "fix: nope", exists_in())

        assert len(out.violations) == 1
        v = out.violations[0]
        assert v.rule_id == PR_TITLE_REGEX
        assert v.severity == Severity.ERROR
        assert "^feat:" in v.message
        assert "fix: nope" in v.message

    def test_match_anywhere(self):
        out = compile_violations(PolicyConfig(title_regex="JIRA-\\d+"), "feat: add thing (JIRA-12)", exists_in())
        assert out.violations == ()

    def test_empty_title(self):
        out = compile_violations(PolicyConfig(title_regex="."), "", exists_in())
        assert [v.rule_id for v in out.violations] == [PR_TITLE_REGEX]


class TestRequiredFiles:
    def test_all_missing_paths_in_one_violation(self):
        config = PolicyConfig(required_files=("README.md", "LICENSE", "CODEOWNERS"))
        out = compile_violations(config, "", exists_in("LICENSE"))

        assert len(out.violations) == 1
        v = out.violations[0]
        assert v.rule_id == REQUIRED_FILES
        assert v.severity == Severity.ERROR
        assert v.context["missing"] == ["README.md", "CODEOWNERS"]
        assert "README.md" in v.message and "CODEOWNERS" in v.message

    def test_all_present(self):
        out = compile_violations(PolicyConfig(required_files=("README.md",)), "", exists_in("README.md"))
        assert out.violations == ()

    def test_title_then_files_order(self):
        config = PolicyConfig(title_regex="^feat:", required_files=("README.md",))
        out = compile_violations(config, "fix: x", exists_in())
        assert [v.rule_id for v in out.violations] == [PR_TITLE_REGEX, REQUIRED_FILES]
