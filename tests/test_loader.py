from __future__ import annotations

import json

import pytest

from conftest import make_record
from timing_summary.errors import InputProblem, InputValidationError
from timing_summary.loader import load_activities, parse_activities


@pytest.mark.parametrize(
    ("text", "reason"),
    [
        ("{not json", InputProblem.NOT_JSON),
        (b"\x80abc", InputProblem.NOT_JSON),
        ('{"application": "Safari"}', InputProblem.NOT_ARRAY),
        ("[]", InputProblem.EMPTY),
        ('[{"application": "Safari", "startDate": "2024-01-01"}]', InputProblem.MISSING_FIELDS),
        ('["just a string"]', InputProblem.MISSING_FIELDS),
    ],
)
def test_structural_problems_are_distinguished(text, reason):
    with pytest.raises(InputValidationError) as excinfo:
        parse_activities(text)
    assert excinfo.value.reason is reason


def test_messages_describe_the_problem():
    with pytest.raises(InputValidationError, match="Expected an array of activities"):
        parse_activities("42")
    with pytest.raises(InputValidationError, match="no activities"):
        parse_activities("[]")


def test_only_first_record_is_checked():
    records = [make_record(), {"application": ""}]
    assert parse_activities(json.dumps(records)) == records


def test_load_activities_reads_file(export_file, sample_records):
    assert load_activities(export_file) == sample_records
