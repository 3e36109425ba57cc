import pytest
from policygate.rules.errors import RangeSyntaxError
from policygate.rules.ranges import coerce_version, is_valid_range, parse_range, satisfies
from semver import Version


class TestParseRange:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "*",
            "x",
            "1",
            "1.2",
            "1.2.3",
            "=1.2.3",
            "v1.2.3",
            "<4.17.21",
            ">= 1.2.3",
            ">=1.2.3 <2.0.0",
            "~1.2.3",
            "~>1.2",
            "^0.2.3",
            "1.2.x",
            "1.2.3 - 2.3.4",
            "^1.0.0 || ^2.0.0",
            "1.2.3-beta.1",
            "1.2.3+build.5",
        ],
    )
    def test_valid(self, text):
        assert is_valid_range(text)

    @pytest.mark.parametrize("text", ["not-a-range", "latest", ">>1.2.3", "1.2.3.4", "^", "01.2.3", "1.2.3 -"])
    def test_invalid(self, text):
        assert not is_valid_range(text)
        with pytest.raises(RangeSyntaxError):
            parse_range(text)

    def test_error_carries_range(self):
        with pytest.raises(RangeSyntaxError) as exc:
            parse_range("not-a-range")
        assert exc.value.range_text == "not-a-range"
        assert exc.value.code == "invalid_range"

    @pytest.mark.parametrize("text", ["<" + "1" * 5000, "1." + "9" * 17 + ".0", "<1.2.3-" + "1" * 5000])
    def test_oversized_numbers_are_invalid(self, text):
        assert not is_valid_range(text)
        with pytest.raises(RangeSyntaxError):
            parse_range(text)

    def test_alphanumeric_prerelease_still_valid(self):
        assert is_valid_range(">=1.2.3-rc.1")
        assert is_valid_range("<1.2.3-0beta")


class TestSatisfies:
    @pytest.mark.parametrize(
        "version,range_text,expected",
        [
            ("4.17.20", "<4.17.21", True),
            ("4.17.21", "<4.17.21", False),
            ("1.2.3", "*", True),
            ("1.2.3", "", True),
            ("1.9.9", "1", True),
            ("2.0.0", "1", False),
            ("1.2.9", "1.2", True),
            ("1.3.0", "1.2", False),
            ("1.2.3", "1.2.3", True),
            ("1.2.4", "1.2.3", False),
            ("1.2.5", "~1.2.3", True),
            ("1.3.0", "~1.2.3", False),
            ("1.9.0", "~1", True),
            ("1.9.0", "^1.2.3", True),
            ("2.0.0", "^1.2.3", False),
            ("0.2.9", "^0.2.3", True),
            ("0.3.0", "^0.2.3", False),
            ("0.0.3", "^0.0.3", True),
            ("0.0.4", "^0.0.3", False),
            ("0.0.9", "^0.0", True),
            ("0.1.0", "^0.0", False),
            ("2.0.0", ">1", True),
            ("1.9.9", ">1", False),
            ("1.3.0", ">1.2", True),
            ("1.2.9", "<=1.2", True),
            ("1.3.0", "<=1.2", False),
            ("1.5.0", "1.2.3 - 2.3.4", True),
            ("2.3.4", "1.2.3 - 2.3.4", True),
            ("2.3.5", "1.2.3 - 2.3.4", False),
            ("2.3.9", "1.2.3 - 2.3", True),
            ("2.4.0", "1.2.3 - 2.3", False),
            ("1.5.0", "^1.0.0 || ^3.0.0", True),
            ("2.5.0", "^1.0.0 || ^3.0.0", False),
            ("3.1.0", "^1.0.0 || ^3.0.0", True),
            ("1.5.0", ">=1.0.0 <2.0.0", True),
            ("2.0.0", ">=1.0.0 <2.0.0", False),
            ("1.2.3", "<*", False),
        ],
    )
    def test_matrix(self, version, range_text, expected):
        assert satisfies(version, range_text) is expected

    def test_prerelease_included(self):
        assert satisfies("4.17.21-beta.1", "<4.17.21")
        assert satisfies("2.0.0-rc.1", "^1.2.3") is False
        assert satisfies("1.3.0-alpha", "^1.2.3")

    def test_uncoercible_version_never_matches(self):
        assert satisfies("workspace", "*") is False

    def test_invalid_range_raises(self):
        with pytest.raises(RangeSyntaxError):
            satisfies("1.0.0", "nope")


class TestCoerceVersion:
    def test_full_version_kept(self):
        assert coerce_version("1.2.3") == Version(1, 2, 3)

    def test_prerelease_kept(self):
        v = coerce_version("1.2.3-beta.2+sha.1")
        assert v is not None
        assert v.prerelease == "beta.2"

    def test_prefix_stripped(self):
        assert coerce_version("v2.0.1") == Version(2, 0, 1)

    @pytest.mark.parametrize("text,expected", [("1", (1, 0, 0)), ("1.2", (1, 2, 0)), ("npm:1.4", (1, 4, 0))])
    def test_partial_normalized_upward(self, text, expected):
        assert coerce_version(text) == Version(*expected)

    @pytest.mark.parametrize("text", ["", "latest", "file:../pkg"])
    def test_unrecognizable(self, text):
        assert coerce_version(text) is None

    def test_oversized_prerelease_falls_back_to_digits(self):
        assert coerce_version("1.2.3-" + "7" * 5000) == Version(1, 2, 3)

    def test_oversized_major_is_not_parsed(self):
        assert coerce_version("9" * 5000) is None
        assert satisfies("1.2.3-" + "7" * 5000, "<2.0.0")
