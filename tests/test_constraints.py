"""Tests for constraint parsing and matching."""

import pytest

from lf_install.errors import MalformedConstraintError
from lf_install.versioning.constraints import Constraint, Constraints, parse_constraints
from lf_install.versioning.version import parse_version


def matches(constraint: str, version: str) -> bool:
    return parse_constraints(constraint).check(parse_version(version))


class TestParse:
    def test_comma_separated(self):
        cs = parse_constraints(">= 1.0.0, < 1.0.10")
        assert len(cs) == 2
        assert [c.operator for c in cs] == [">=", "<"]
        assert str(cs) == ">= 1.0.0, < 1.0.10"

    def test_bare_version_means_equal(self):
        c = Constraint.parse("1.2.3")
        assert c.operator == ""
        assert str(c) == "= 1.2.3"
        assert c == Constraint.parse("=1.2.3")

    def test_empty_string_matches_everything(self):
        cs = parse_constraints("")
        assert not cs
        assert cs.check(parse_version("0.0.1"))
        assert cs.check(parse_version("9.9.9-rc1"))

    @pytest.mark.parametrize("text", [">=", ">= 1.0,", "=> 1.0", ">= abc", "1.0 2.0"])
    def test_malformed(self, text):
        with pytest.raises(MalformedConstraintError) as exc_info:
            parse_constraints(text)
        assert exc_info.value.field == "constraints"


class TestCheck:
    @pytest.mark.parametrize(
        "constraint,version,expected",
        [
            (">= 1.0.0, < 1.0.10", "1.0.9", True),
            (">= 1.0.0, < 1.0.10", "1.0.10", False),
            (">= 1.0.0, < 1.0.10", "0.9.9", False),
            ("= 1.9.8", "1.9.8", True),
            ("!= 1.9.8", "1.9.8", False),
            ("!= 1.9.8", "1.9.7", True),
            ("> 1.0", "1.0.1", True),
            ("<= 1.0", "1.0.0", True),
            ("~> 1.3", "1.9.0", True),
            ("~> 1.3", "2.0.0", False),
            ("~> 1.3.0", "1.3.7", True),
            ("~> 1.3.0", "1.4.0", False),
            ("~> 1.3.2", "1.3.1", False),
        ],
    )
    def test_operators(self, constraint, version, expected):
        assert matches(constraint, version) is expected

    def test_prerelease_excluded_from_ordering_constraints(self):
        assert not matches(">= 0.14.0", "0.15.0-rc2")
        assert not matches("< 1.0.0", "0.15.0-rc2")

    def test_prerelease_allowed_when_constraint_names_one(self):
        assert matches(">= 0.15.0-rc1", "0.15.0-rc2")
        assert not matches(">= 0.14.0-rc1", "0.15.0-rc2")

    def test_metadata_does_not_affect_matching(self):
        assert matches(">= 1.9.0, < 1.9.9", "1.9.8+ent.hsm")

    def test_equality_and_hash(self):
        a = Constraints.parse(">= 1.0, < 2.0")
        b = Constraints.parse(">=1.0,<2.0")
        assert a == b
        assert hash(a) == hash(b)
