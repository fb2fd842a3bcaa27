"""입력 검증 (순수 함수)

모든 검증 함수는 Ok(정규화된 값) 또는 Err(BAD_REQUEST, 메시지)를 반환한다.
복합 검증은 첫 번째 위반에서 멈춘다.
"""
import math
import re
from datetime import date
from decimal import Decimal
from typing import Any, Dict

from errors import ErrorKind, Ok, Err, Result

DATE_ONLY_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
MAX_STRING_LENGTH = 255
# Numeric(12, 2) 범위
MAX_SALARY = Decimal("10000000000")
CENTS = Decimal("0.01")

PATCHABLE_FIELDS = ("firstname", "lastname", "dob")


def _bad_request(message: str) -> Err:
    return Err(ErrorKind.BAD_REQUEST, message)


def normalize_email(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def is_valid_email(value: Any) -> bool:
    """느슨한 검사: '@'와 '.' 포함 여부만 확인"""
    return isinstance(value, str) and "@" in value and "." in value


def is_valid_date_only(value: Any) -> bool:
    """YYYY-MM-DD 형식이면서 실제 존재하는 날짜인지 확인 (2025-02-31 거부)"""
    if not isinstance(value, str) or not DATE_ONLY_PATTERN.fullmatch(value):
        return False

    year, month, day = (int(part) for part in value.split("-"))
    try:
        parsed = date(year, month, day)
    except ValueError:
        return False
    return (parsed.year, parsed.month, parsed.day) == (year, month, day)


def require_string(value: Any, field: str) -> Result[str]:
    if not isinstance(value, str) or not value.strip():
        return _bad_request(f"{field} is required and must be a non-empty string.")
    value = value.strip()
    if len(value) > MAX_STRING_LENGTH:
        return _bad_request(f"{field} must be at most {MAX_STRING_LENGTH} characters.")
    return Ok(value)


def require_number(value: Any, field: str) -> Result[float]:
    # bool은 int의 서브클래스이므로 별도 제외. int는 항상 유한 (float 변환 시 OverflowError)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _bad_request(f"{field} is required and must be a number.")
    if isinstance(value, float) and not math.isfinite(value):
        return _bad_request(f"{field} is required and must be a number.")
    return Ok(value)


def _require_object(value: Any, field: str) -> Result[dict]:
    if not isinstance(value, dict):
        return _bad_request(f"{field} must be a JSON object.")
    return Ok(value)


def _email(value: Any, field: str) -> Result[str]:
    if value is not None and not isinstance(value, str):
        return _bad_request(f"{field} must be a string.")
    email = normalize_email(value)
    if not email:
        return _bad_request(f"{field} is required.")
    if not is_valid_email(email) or len(email) > MAX_STRING_LENGTH:
        return _bad_request(f"{field} must be a valid email address.")
    return Ok(email)


def _date_only(value: Any, field: str) -> Result[str]:
    result = require_string(value, field)
    if isinstance(result, Err):
        return result
    if not is_valid_date_only(result.value):
        return _bad_request(f"{field} must be a valid date in YYYY-MM-DD format.")
    return result


def validate_participant(data: Any, prefix: str = "") -> Result[Dict[str, str]]:
    """{email, firstname, lastname, dob} 검증 및 정규화"""
    checked = _require_object(data, prefix.rstrip(".") or "request body")
    if isinstance(checked, Err):
        return checked

    normalized = {}
    checks = (
        ("email", _email),
        ("firstname", require_string),
        ("lastname", require_string),
        ("dob", _date_only),
    )
    for name, check_field in checks:
        result = check_field(data.get(name), f"{prefix}{name}")
        if isinstance(result, Err):
            return result
        normalized[name] = result.value
    return Ok(normalized)


def validate_participant_patch(data: Any) -> Result[Dict[str, str]]:
    """부분 수정: 전달된 필드만 검증하여 반환"""
    checked = _require_object(data, "request body")
    if isinstance(checked, Err):
        return checked

    if not any(name in data for name in PATCHABLE_FIELDS):
        return _bad_request(f"At least one of {', '.join(PATCHABLE_FIELDS)} is required.")

    normalized = {}
    if "email" in data:
        result = _email(data["email"], "email")
        if isinstance(result, Err):
            return result
        normalized["email"] = result.value

    for name in PATCHABLE_FIELDS:
        if name not in data:
            continue
        check_field = _date_only if name == "dob" else require_string
        result = check_field(data[name], name)
        if isinstance(result, Err):
            return result
        normalized[name] = result.value
    return Ok(normalized)


def validate_work(data: Any, prefix: str = "work.") -> Result[Dict[str, Any]]:
    checked = _require_object(data, prefix.rstrip("."))
    if isinstance(checked, Err):
        return checked

    companyname = require_string(data.get("companyname"), f"{prefix}companyname")
    if isinstance(companyname, Err):
        return companyname

    salary = require_number(data.get("salary"), f"{prefix}salary")
    if isinstance(salary, Err):
        return salary
    # 범위 확인 후 변환 (큰 값은 quantize에서 InvalidOperation)
    out_of_range = _bad_request(f"{prefix}salary must be a non-negative number below {MAX_SALARY}.")
    if salary.value < 0 or salary.value >= MAX_SALARY:
        return out_of_range
    amount = Decimal(str(salary.value)).quantize(CENTS)
    # 9999999999.999 → 10000000000.00
    if amount >= MAX_SALARY:
        return out_of_range

    currency = require_string(data.get("currency"), f"{prefix}currency")
    if isinstance(currency, Err):
        return currency

    return Ok({
        "companyname": companyname.value,
        "salary": amount,
        "currency": currency.value,
    })


def validate_home(data: Any, prefix: str = "home.") -> Result[Dict[str, str]]:
    checked = _require_object(data, prefix.rstrip("."))
    if isinstance(checked, Err):
        return checked

    normalized = {}
    for name in ("country", "city"):
        result = require_string(data.get(name), f"{prefix}{name}")
        if isinstance(result, Err):
            return result
        normalized[name] = result.value
    return Ok(normalized)


def validate_nested(data: Any) -> Result[Dict[str, dict]]:
    """{participant, work, home} 전체 구조 검증"""
    checked = _require_object(data, "request body")
    if isinstance(checked, Err):
        return checked

    if not all(isinstance(data.get(part), dict) for part in ("participant", "work", "home")):
        return _bad_request("participant, work and home objects are required.")

    participant = validate_participant(data["participant"], "participant.")
    if isinstance(participant, Err):
        return participant
    work = validate_work(data["work"])
    if isinstance(work, Err):
        return work
    home = validate_home(data["home"])
    if isinstance(home, Err):
        return home

    return Ok({
        "participant": participant.value,
        "work": work.value,
        "home": home.value,
    })


def parse_email_param(value: Any) -> Result[str]:
    """경로 파라미터 이메일 정규화"""
    email = normalize_email(value)
    if not is_valid_email(email):
        return _bad_request("email must be a valid email address.")
    return Ok(email)


def check(result: Result) -> Any:
    """pydantic 검증기 연결용: Err면 ValueError 발생"""
    if isinstance(result, Err):
        raise ValueError(result.message)
    return result.value
