from decimal import Decimal

import pytest

from errors import Err, ErrorKind, Ok
from validation import (
    check,
    is_valid_date_only,
    is_valid_email,
    normalize_email,
    parse_email_param,
    require_number,
    require_string,
    validate_nested,
    validate_participant,
    validate_participant_patch,
    validate_work,
)


def valid_nested():
    return {
        "participant": {"email": " Jo@Example.COM", "firstname": " Jo ", "lastname": "Doe", "dob": "1990-05-10"},
        "work": {"companyname": "Acme", "salary": 50000, "currency": "USD"},
        "home": {"country": "NO", "city": "Oslo"},
    }


def test_normalize_email():
    assert normalize_email("  A@B.Com ") == "a@b.com"
    assert normalize_email(None) == ""
    assert normalize_email("") == ""


@pytest.mark.parametrize("value,expected", [
    ("a@b.com", True),
    ("first.last@host", True),
    ("ab.com", False),
    ("a@bcom", False),
    ("", False),
    (None, False),
    (42, False),
])
def test_is_valid_email(value, expected):
    assert is_valid_email(value) is expected


@pytest.mark.parametrize("value", ["1990-05-10", "2024-02-29", "2000-12-31", "0001-01-01"])
def test_is_valid_date_only_accepts_calendar_dates(value):
    assert is_valid_date_only(value)


@pytest.mark.parametrize("value", [
    "2025-13-01",
    "2025-02-31",
    "2023-02-29",
    "2025-04-31",
    "0000-01-01",
    "1990-5-10",
    "10-05-1990",
    "1990/05/10",
    "1990-05-10T00:00:00",
    "1990-05-10\n",
    "",
    None,
    19900510,
])
def test_is_valid_date_only_rejects(value):
    assert not is_valid_date_only(value)


def test_require_string_trims():
    assert require_string("  Jo ", "firstname") == Ok("Jo")


@pytest.mark.parametrize("value", [None, "", "   ", 5, ["x"]])
def test_require_string_names_the_field(value):
    result = require_string(value, "participant.firstname")
    assert isinstance(result, Err)
    assert result.kind is ErrorKind.BAD_REQUEST
    assert "participant.firstname" in result.message


def test_require_string_rejects_overlong():
    assert isinstance(require_string("x" * 256, "city"), Err)


@pytest.mark.parametrize("value", [0, 12, 12.5, 10**400])
def test_require_number_accepts(value):
    assert require_number(value, "salary") == Ok(value)


@pytest.mark.parametrize("value", [None, "100", True, float("nan"), float("inf")])
def test_require_number_rejects(value):
    result = require_number(value, "work.salary")
    assert isinstance(result, Err)
    assert "work.salary" in result.message


def test_validate_participant_normalizes():
    result = validate_participant({"email": " Jo@Example.COM", "firstname": " Jo ", "lastname": "Doe", "dob": "1990-05-10"})
    assert result == Ok({"email": "jo@example.com", "firstname": "Jo", "lastname": "Doe", "dob": "1990-05-10"})


def test_validate_participant_stops_at_first_violation():
    result = validate_participant({"email": "bad", "firstname": "", "dob": "nope"})
    assert result.message == "email must be a valid email address."


def test_validate_participant_requires_object():
    assert isinstance(validate_participant(["not", "a", "dict"]), Err)


def test_validate_work_quantizes_salary():
    result = validate_work({"companyname": "Acme", "salary": 1234.567, "currency": "EUR"})
    assert result.value["salary"] == Decimal("1234.57")


def test_validate_work_rejects_negative_salary():
    result = validate_work({"companyname": "Acme", "salary": -1, "currency": "EUR"})
    assert isinstance(result, Err)
    assert "work.salary" in result.message


@pytest.mark.parametrize("salary", [10000000000, 10**400, 1e300, 9999999999.999])
def test_validate_work_rejects_salary_out_of_range(salary):
    result = validate_work({"companyname": "Acme", "salary": salary, "currency": "EUR"})
    assert result == Err(
        ErrorKind.BAD_REQUEST,
        "work.salary must be a non-negative number below 10000000000.",
    )


def test_validate_work_accepts_largest_salary():
    result = validate_work({"companyname": "Acme", "salary": 9999999999.99, "currency": "EUR"})
    assert result.value["salary"] == Decimal("9999999999.99")


def test_validate_nested_returns_normalized_sections():
    result = validate_nested(valid_nested())
    assert isinstance(result, Ok)
    assert result.value["participant"]["email"] == "jo@example.com"
    assert result.value["participant"]["firstname"] == "Jo"
    assert result.value["work"]["salary"] == Decimal("50000.00")
    assert result.value["home"] == {"country": "NO", "city": "Oslo"}


@pytest.mark.parametrize("missing", ["participant", "work", "home"])
def test_validate_nested_requires_all_sections(missing):
    payload = valid_nested()
    del payload[missing]
    result = validate_nested(payload)
    assert result.message == "participant, work and home objects are required."


def test_validate_nested_prefixes_field_names():
    payload = valid_nested()
    payload["home"]["city"] = ""
    assert validate_nested(payload).message == "home.city is required and must be a non-empty string."

    payload = valid_nested()
    payload["participant"]["dob"] = "2025-02-31"
    assert validate_nested(payload).message == "participant.dob must be a valid date in YYYY-MM-DD format."


def test_validate_participant_patch_keeps_only_supplied_fields():
    assert validate_participant_patch({"lastname": " Smith "}) == Ok({"lastname": "Smith"})


def test_validate_participant_patch_requires_an_updatable_field():
    assert isinstance(validate_participant_patch({}), Err)
    assert isinstance(validate_participant_patch({"email": "a@b.com"}), Err)


def test_validate_participant_patch_checks_dob():
    assert isinstance(validate_participant_patch({"dob": "2025-13-01"}), Err)


def test_parse_email_param():
    assert parse_email_param(" A@B.com") == Ok("a@b.com")
    assert isinstance(parse_email_param("not-an-email"), Err)


def test_check_raises_value_error():
    assert check(Ok(1)) == 1
    with pytest.raises(ValueError, match="boom"):
        check(Err(ErrorKind.BAD_REQUEST, "boom"))
