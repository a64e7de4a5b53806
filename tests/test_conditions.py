from datetime import datetime, timedelta, timezone

import pytest

from trustbundle.conditions import (
    BundleCondition,
    BundleStatus,
    ConditionStatus,
    bundle_has_condition,
    set_bundle_condition,
    set_bundle_status_default_ca_version,
)

BUNDLE_GENERATION = 2
FIXED_TIME = datetime(2021, 1, 1, 1, 0, 0, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED_TIME


@pytest.mark.parametrize(
    "existing, search, expected",
    [
        ([], BundleCondition(reason="A", observed_generation=BUNDLE_GENERATION), False),
        (
            [BundleCondition(reason="B")],
            BundleCondition(reason="A", observed_generation=BUNDLE_GENERATION),
            False,
        ),
        (
            [BundleCondition(reason="A", observed_generation=BUNDLE_GENERATION - 1)],
            BundleCondition(reason="A", observed_generation=BUNDLE_GENERATION),
            False,
        ),
        (
            [BundleCondition(reason="A", observed_generation=BUNDLE_GENERATION)],
            BundleCondition(reason="A", observed_generation=BUNDLE_GENERATION),
            True,
        ),
        (
            [
                BundleCondition(
                    reason="A",
                    observed_generation=BUNDLE_GENERATION,
                    last_transition_time=FIXED_TIME - timedelta(seconds=1),
                )
            ],
            BundleCondition(reason="A", observed_generation=BUNDLE_GENERATION),
            True,
        ),
    ],
)
def test_bundle_has_condition(existing, search, expected):
    assert bundle_has_condition(existing, search) is expected


NEW_CONDITION = BundleCondition(
    type="A",
    status=ConditionStatus.TRUE,
    reason="B",
    message="C",
    observed_generation=BUNDLE_GENERATION,
)


@pytest.mark.parametrize(
    "existing, expected",
    [
        (
            [],
            [
                BundleCondition(
                    type="A",
                    status=ConditionStatus.TRUE,
                    reason="B",
                    message="C",
                    last_transition_time=FIXED_TIME,
                    observed_generation=BUNDLE_GENERATION,
                )
            ],
        ),
        (
            [BundleCondition(type="B")],
            [
                BundleCondition(
                    type="A",
                    status=ConditionStatus.TRUE,
                    reason="B",
                    message="C",
                    last_transition_time=FIXED_TIME,
                    observed_generation=BUNDLE_GENERATION,
                )
            ],
        ),
        (
            [
                BundleCondition(
                    type="A",
                    status=ConditionStatus.FALSE,
                    reason="B",
                    message="C",
                    last_transition_time=FIXED_TIME,
                    observed_generation=BUNDLE_GENERATION - 1,
                )
            ],
            [
                BundleCondition(
                    type="A",
                    status=ConditionStatus.TRUE,
                    reason="B",
                    message="C",
                    last_transition_time=FIXED_TIME,
                    observed_generation=BUNDLE_GENERATION,
                )
            ],
        ),
        (
            [
                BundleCondition(
                    type="A",
                    status=ConditionStatus.TRUE,
                    reason="B",
                    message="C",
                    last_transition_time=FIXED_TIME - timedelta(seconds=1),
                    observed_generation=BUNDLE_GENERATION - 1,
                )
            ],
            [
                BundleCondition(
                    type="A",
                    status=ConditionStatus.TRUE,
                    reason="B",
                    message="C",
                    last_transition_time=FIXED_TIME - timedelta(seconds=1),
                    observed_generation=BUNDLE_GENERATION,
                )
            ],
        ),
    ],
)
def test_set_bundle_condition(existing, expected):
    patch_conditions = []
    result = set_bundle_condition(existing, patch_conditions, NEW_CONDITION, fixed_clock)
    assert patch_conditions == expected
    assert result == expected[0]


def test_set_bundle_condition_overwrites_same_type_in_patch():
    patch_conditions = [BundleCondition(type="A", reason="old"), BundleCondition(type="Z")]
    set_bundle_condition([], patch_conditions, NEW_CONDITION, fixed_clock)
    assert len(patch_conditions) == 2
    assert patch_conditions[0].reason == "B"
    assert patch_conditions[0].last_transition_time == FIXED_TIME
    assert patch_conditions[1] == BundleCondition(type="Z")


@pytest.mark.parametrize(
    "current, required_id, expected_version, expect_update",
    [
        ("abc123", "", None, True),
        ("", "", None, True),
        (None, "", None, False),
        (None, "abc123", "abc123", True),
        ("def456", "abc123", "abc123", True),
        ("abc123", "abc123", "abc123", False),
    ],
)
def test_set_bundle_status_default_ca_version(current, required_id, expected_version, expect_update):
    status = BundleStatus(default_ca_package_version=current)
    assert set_bundle_status_default_ca_version(status, required_id) is expect_update
    assert status.default_ca_package_version == expected_version