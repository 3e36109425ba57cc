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

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass

from semver import Version

from policygate.rules.errors import RangeSyntaxError

# npm range grammar:
#
#   range-set  ::= range ( '||' range )*
#   range      ::= hyphen | simple ( ' ' simple )* | ''
#   hyphen     ::= partial ' - ' partial
#   simple     ::= primitive | partial | tilde | caret
#   primitive  ::= ( '<' | '>' | '>=' | '<=' | '=' ) partial
#   partial    ::= xr ( '.' xr ( '.' xr qualifier? )? )?
#   xr         ::= 'x' | 'X' | '*' | nr

# numeric components are capped at 16 digits
_XR = r"(?:[xX*]|0|[1-9]\d{0,15})"
_PRE_PART = r"(?:\d*[A-Za-z-][0-9A-Za-z-]*|\d{1,16})"
_PRE = rf"{_PRE_PART}(?:\.{_PRE_PART})*"
_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

_PARTIAL = (
    rf"v?(?P<major>{_XR})"
    rf"(?:\.(?P<minor>{_XR})"
    rf"(?:\.(?P<patch>{_XR})"
    rf"(?:-(?P<pre>{_PRE}))?"
    rf"(?:\+(?P<build>{_IDENT}))?)?)?"
)

_PARTIAL_RE = re.compile(rf"^={{0,1}}{_PARTIAL}$")
_COMPARATOR_RE = re.compile(rf"^(?P<op><=|>=|<|>|=|~>|~|\^)?{_PARTIAL}$")
_HYPHEN_RE = re.compile(r"^(?P<low>\S+)\s+-\s+(?P<high>\S+)$")
# ">= 1.2.3" is the same as ">=1.2.3"
_OPERATOR_GAP_RE = re.compile(r"(<=|>=|<|>|=|~>|~|\^)\s+")

_COERCE_RE = re.compile(r"(?<!\d)(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?(?!\d)")

_OPS: dict[str, Callable[[Version, Version], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "=": operator.eq,
}


@dataclass(frozen=True, slots=True)
class Comparator:
    op: str
    version: Version

    def test(self, version: Version) -> bool:
        return _OPS[self.op](version, self.version)

    def __str__(self) -> str:
        return f"{self.op}{self.version}"


# Matches nothing: every version is >= 0.0.0-0
_NOTHING = (Comparator("<", Version(0, 0, 0, prerelease="0")),)


@dataclass(frozen=True, slots=True)
class _Partial:
    major: int | None
    minor: int | None
    patch: int | None
    prerelease: str | None = None
    build: str | None = None

    @property
    def is_any(self) -> bool:
        return self.major is None

    @property
    def is_full(self) -> bool:
        return self.patch is not None

    def floor(self) -> Version:
        """Lowest version covered by this partial, pre-releases included."""
        if self.is_full:
            return Version(self.major, self.minor, self.patch, prerelease=self.prerelease, build=self.build)
        return Version(self.major or 0, self.minor or 0, 0, prerelease="0")

    def ceiling(self) -> Version:
        """First version past this partial (exclusive upper bound)."""
        if self.minor is None:
            return Version(self.major + 1, 0, 0, prerelease="0")
        return Version(self.major, self.minor + 1, 0, prerelease="0")


@dataclass(frozen=True, slots=True)
class VersionRange:
    """
    A compiled range: OR of comparator sets, each an AND of comparators.

    Pre-release versions are always eligible to match.
    """

    raw: str
    alternatives: tuple[tuple[Comparator, ...], ...]

    def satisfied_by(self, version: Version) -> bool:
        return any(all(c.test(version) for c in group) for group in self.alternatives)

    def __str__(self) -> str:
        return " || ".join(" ".join(str(c) for c in group) or "*" for group in self.alternatives)


# Parsing


def _xr(value: str | None) -> int | None:
    if value is None or value in ("x", "X", "*"):
        return None
    return int(value)


def _partial_from(match: re.Match[str]) -> _Partial:
    major = _xr(match.group("major"))
    minor = _xr(match.group("minor")) if major is not None else None
    patch = _xr(match.group("patch")) if minor is not None else None
    if patch is None:
        return _Partial(major, minor, None)
    return _Partial(major, minor, patch, match.group("pre"), match.group("build"))


def _parse_partial(text: str, range_text: str) -> _Partial:
    m = _PARTIAL_RE.match(text)
    if m is None:
        raise RangeSyntaxError(range_text, f"'{text}' is not a version")
    return _partial_from(m)


def _desugar_x_range(p: _Partial) -> tuple[Comparator, ...]:
    if p.is_any:
        return ()
    if p.is_full:
        return (Comparator("=", p.floor()),)
    return (Comparator(">=", p.floor()), Comparator("<", p.ceiling()))


def _desugar_primitive(op: str, p: _Partial) -> tuple[Comparator, ...]:
    if p.is_any:
        return _NOTHING if op in ("<", ">") else ()
    if p.is_full:
        return (Comparator(op, p.floor()),)

    # partial bounds widen to whole minor/major buckets
    if op == ">":
        return (Comparator(">=", p.ceiling()),)
    if op == ">=":
        return (Comparator(">=", p.floor()),)
    if op == "<":
        return (Comparator("<", p.floor()),)
    return (Comparator("<", p.ceiling()),)


def _desugar_tilde(p: _Partial) -> tuple[Comparator, ...]:
    if p.is_any:
        return ()
    if not p.is_full:
        return _desugar_x_range(p)
    upper = Version(p.major, p.minor + 1, 0, prerelease="0")
    return (Comparator(">=", p.floor()), Comparator("<", upper))


def _desugar_caret(p: _Partial) -> tuple[Comparator, ...]:
    if p.is_any:
        return ()
    if p.minor is None or p.major != 0:
        upper = Version(p.major + 1, 0, 0, prerelease="0")
    elif p.patch is None or p.minor != 0:
        upper = Version(0, p.minor + 1, 0, prerelease="0")
    else:
        upper = Version(0, 0, p.patch + 1, prerelease="0")
    return (Comparator(">=", p.floor()), Comparator("<", upper))


def _desugar_hyphen(low: _Partial, high: _Partial) -> tuple[Comparator, ...]:
    out: list[Comparator] = []
    if not low.is_any:
        out.append(Comparator(">=", low.floor()))
    if not high.is_any:
        if high.is_full:
            out.append(Comparator("<=", high.floor()))
        else:
            out.append(Comparator("<", high.ceiling()))
    return tuple(out)


def _parse_comparator(token: str, range_text: str) -> tuple[Comparator, ...]:
    m = _COMPARATOR_RE.match(token)
    if m is None:
        raise RangeSyntaxError(range_text, f"unexpected '{token}'")

    op = m.group("op")
    p = _partial_from(m)

    if op in ("~", "~>"):
        return _desugar_tilde(p)
    if op == "^":
        return _desugar_caret(p)
    if op is None or op == "=":
        return _desugar_x_range(p)
    return _desugar_primitive(op, p)


def _parse_alternative(text: str, range_text: str) -> tuple[Comparator, ...]:
    text = text.strip()
    if not text:
        return ()

    hyphen = _HYPHEN_RE.match(text)
    if hyphen is not None:
        return _desugar_hyphen(
            _parse_partial(hyphen.group("low"), range_text),
            _parse_partial(hyphen.group("high"), range_text),
        )

    text = _OPERATOR_GAP_RE.sub(r"\1", text)
    out: list[Comparator] = []
    for token in text.split():
        out.extend(_parse_comparator(token, range_text))
    return tuple(out)


def parse_range(text: str) -> VersionRange:
    """
    Compile an npm-style range string.

    Raises:
        RangeSyntaxError if the text does not follow the range grammar.
    """
    if not isinstance(text, str):
        raise RangeSyntaxError(str(text), "range must be a string")

    alternatives = tuple(_parse_alternative(part, text) for part in text.split("||"))
    return VersionRange(raw=text, alternatives=alternatives)


def is_valid_range(text: str) -> bool:
    try:
        parse_range(text)
    except RangeSyntaxError:
        return False
    return True


# Versions


def _oversized(version: Version) -> bool:
    if max(version.major, version.minor, version.patch) >= 10**16:
        return True
    parts = (version.prerelease or "").split(".")
    return any(p.isdigit() and len(p) > 16 for p in parts)


def coerce_version(text: str) -> Version | None:
    """
    Coerce a resolved version string into a three-component Version.

    A well-formed semantic version (optionally prefixed with "v" or "=")
    keeps its pre-release and build parts. Otherwise the first run of
    `major[.minor[.patch]]` digits is used, missing parts filled with 0.
    Returns None when no digits are found.
    """
    if not isinstance(text, str):
        return None

    cleaned = text.strip().lstrip("=v").strip()
    try:
        parsed = Version.parse(cleaned)
    except ValueError:
        pass
    else:
        if not _oversized(parsed):
            return parsed

    m = _COERCE_RE.search(cleaned)
    if m is None:
        return None
    major, minor, patch = m.groups()
    return Version(int(major), int(minor or 0), int(patch or 0))


def satisfies(version: str, range_text: str) -> bool:
    """
    True when `version` (coerced) falls inside `range_text`.

    Raises:
        RangeSyntaxError for an invalid range.
    """
    v = coerce_version(version)
    if v is None:
        return False
    return parse_range(range_text).satisfied_by(v)
