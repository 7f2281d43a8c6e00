"""Test building password policies from rule strings."""

import logging

import pydantic
import pytest

from password_rules import Period, PeriodUnit, Rule


def test_empty_rule() -> None:
    """Test an empty rule leaves every field unset."""
    rule = Rule.from_string("")

    assert rule == Rule()
    assert rule.min_length is None
    assert rule.max_length is None
    assert rule.max_consecutive is None
    assert rule.expires_after is None
    assert rule.required is None


def test_full_rule() -> None:
    """Test a rule using every supported property."""
    rule = Rule.from_string(
        "minlength: 8; maxlength: 64; max-consecutive: 2; "
        "required: lower; required: [!@]; x-expires-after: 90-days;"
    )

    assert rule.min_length == 8
    assert rule.max_length == 64
    assert rule.max_consecutive == 2
    assert rule.expires_after == Period(amount=90, unit=PeriodUnit.DAYS)
    assert rule.required is not None
    assert [c.name for c in rule.required] == ["lower", "[!@]"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("minlength: 10", 10),
        ("minlength: +10", 10),
        ("minlength: ten", None),
        ("minlength: 10.5", None),
        ("minlength: 10, 12", None),
        ("minlength: 10; minlength: 12", None),
        ("minlength: -3", -3),
    ],
)
def test_min_length(raw: str, expected: int | None) -> None:
    """Test minlength requires exactly one integer value."""
    assert Rule.from_string(raw).min_length == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("maxlength: 20", 20),
        ("maxlength: 4", 4),
        ("maxlength: 2", 4),
        ("maxlength: -1", 4),
        ("maxlength: twenty", None),
        ("maxlength: 20, 30", None),
    ],
)
def test_max_length(raw: str, expected: int | None) -> None:
    """Test maxlength is clamped to a floor of 4."""
    assert Rule.from_string(raw).max_length == expected


def test_min_length_lowered_to_max_length() -> None:
    """Test minlength never exceeds maxlength."""
    rule = Rule.from_string("minlength: 10; maxlength: 4;")

    assert rule.max_length == 4
    assert rule.min_length == 4


def test_min_length_lowered_to_clamped_max_length() -> None:
    """Test minlength follows maxlength after clamping."""
    rule = Rule.from_string("maxlength: 1; minlength: 6;")

    assert rule.max_length == 4
    assert rule.min_length == 4


def test_min_length_kept_below_max_length() -> None:
    """Test minlength is kept when it fits."""
    rule = Rule.from_string("minlength: 3; maxlength: 2;")

    assert rule.max_length == 4
    assert rule.min_length == 3


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("max-consecutive: 3; max-consecutive: 5;", 3),
        ("max-consecutive: 5; max-consecutive: 3;", 3),
        ("max-consecutive: 5, 2", 2),
        ("max-consecutive: x; max-consecutive: 4", 4),
        ("max-consecutive: x", None),
        ("max-consecutive: 0", 1),
    ],
)
def test_max_consecutive(raw: str, expected: int | None) -> None:
    """Test the smallest valid max-consecutive value wins."""
    assert Rule.from_string(raw).max_consecutive == expected


def test_required_single_bracket_class() -> None:
    """Test a bracket class is one at-least-one-of constraint."""
    rule = Rule.from_string("required: [!@];")

    assert rule.required is not None
    assert len(rule.required) == 1
    assert set(rule.required[0].included) == {"!", "@"}


def test_required_order() -> None:
    """Test required classes keep their order of appearance."""
    rule = Rule.from_string("required: upper; required: lower; required: digit;")

    assert rule.required is not None
    assert [c.name for c in rule.required] == ["upper", "lower", "digit"]
    assert [len(c.included) for c in rule.required] == [26, 26, 10]


def test_required_drops_invalid_classes() -> None:
    """Test values that are not classes are dropped silently."""
    rule = Rule.from_string("required: upper, asdf; required: Digit")

    assert rule.required is not None
    assert [c.name for c in rule.required] == ["upper"]


def test_required_present_but_empty() -> None:
    """Test a present required property yields an empty tuple, not None."""
    assert Rule.from_string("required: nope").required == ()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("x-expires-after: 3-months;", Period(amount=3, unit=PeriodUnit.MONTHS)),
        ("x-expires-after: 1-years", Period(amount=1, unit=PeriodUnit.YEARS)),
        ("x-expires-after: 2-weeks", Period(amount=2, unit=PeriodUnit.WEEKS)),
        ("x-expires-after: 3-fortnights;", None),
        ("x-expires-after: 3-Months", None),
        ("x-expires-after: 3-months-ago", None),
        ("x-expires-after: months", None),
        ("x-expires-after: 3-days, 4-days", None),
    ],
)
def test_expires_after(raw: str, expected: Period | None) -> None:
    """Test the non-standard x-expires-after extension."""
    assert Rule.from_string(raw).expires_after == expected


def test_unsupported_properties_ignored() -> None:
    """Test allowed and unknown properties do not affect the rule."""
    assert Rule.from_string("allowed: upper; x-unknown: 5; minlength: 6") == Rule(
        min_length=6
    )


def test_property_names_case_insensitive() -> None:
    """Test property names are matched case-insensitively."""
    rule = Rule.from_string("MinLength: 6; REQUIRED: lower")

    assert rule.min_length == 6
    assert rule.required is not None
    assert rule.required[0].name == "lower"


def test_idempotence() -> None:
    """Test parsing the same string twice yields equal rules."""
    raw = (
        "minlength: 12; maxlength: 3; max-consecutive: 4; max-consecutive: 2; "
        "required: upper; required: [-_\\]]; x-expires-after: 6-months"
    )

    assert Rule.from_string(raw) == Rule.from_string(raw)


@pytest.mark.parametrize(
    "raw",
    [
        "minlength: 50; maxlength: 3",
        "maxlength: -5; minlength: -5",
        "minlength: 7; maxlength: 7",
        "maxlength: 0",
        "minlength: 99999999999999999999; maxlength: 5",
    ],
)
def test_length_invariants(raw: str) -> None:
    """Test max_length is at least 4 and never below min_length."""
    rule = Rule.from_string(raw)

    assert rule.max_length is not None
    assert rule.max_length >= 4
    if rule.min_length is not None:
        assert rule.min_length <= rule.max_length


def test_rule_is_immutable() -> None:
    """Test rules cannot be modified after parsing."""
    rule = Rule.from_string("minlength: 8")

    with pytest.raises(pydantic.ValidationError):
        rule.min_length = 10  # type: ignore[misc]


def test_rule_rejects_inverted_lengths() -> None:
    """Test direct construction enforces the length ordering."""
    with pytest.raises(pydantic.ValidationError):
        Rule(min_length=10, max_length=5)


def test_skipped_input_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Test dropped values and ignored properties are traced at debug level."""
    caplog.set_level(logging.DEBUG, logger="password_rules")

    Rule.from_string("required: asdf; allowed: upper; maxlength: 1")

    assert "dropping required value 'asdf'" in caplog.text
    assert "ignoring unsupported property 'allowed'" in caplog.text
    assert "raising maxlength 1 to 4" in caplog.text


TOO_MANY_DIGITS = "9" * 5000


@pytest.mark.parametrize(
    "raw",
    [
        f"minlength: {TOO_MANY_DIGITS}",
        f"maxlength: {TOO_MANY_DIGITS}",
        f"max-consecutive: {TOO_MANY_DIGITS}",
        f"x-expires-after: {TOO_MANY_DIGITS}-days",
    ],
)
def test_oversized_integers_left_unset(raw: str) -> None:
    """Test integers beyond the conversion limit leave the field unset."""
    assert Rule.from_string(raw) == Rule()


def test_oversized_integer_skipped_among_others() -> None:
    """Test an oversized max-consecutive value does not hide valid ones."""
    rule = Rule.from_string(f"max-consecutive: {TOO_MANY_DIGITS}; max-consecutive: 3")

    assert rule.max_consecutive == 3


def test_negative_min_length_kept() -> None:
    """Test a negative minlength is kept as parsed and still bounded by maxlength."""
    rule = Rule.from_string("minlength: -3; maxlength: 8")

    assert rule.min_length == -3
    assert rule.max_length == 8
