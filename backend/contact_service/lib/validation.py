"""
Contact form validation.

The request body arrives as arbitrary JSON. ``validate_contact_form`` runs
every field check independently and collects user-facing (Hebrew) messages;
``build_contact_form`` turns a payload that passed validation into an
immutable, sanitized ``ContactFormData``.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from contact_service.lib.sanitize import sanitize_input

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

MIN_NAME_LENGTH = 2
MIN_MESSAGE_LENGTH = 10

INVALID_DATA = "נתונים לא תקינים"
NAME_REQUIRED = "שם מלא הוא שדה חובה"
NAME_TOO_SHORT = "שם חייב להכיל לפחות 2 תווים"
EMAIL_REQUIRED = "כתובת אימייל היא שדה חובה"
EMAIL_INVALID = "כתובת אימייל לא תקינה"
PROJECT_TYPE_REQUIRED = "יש לבחור סוג פרויקט"
MESSAGE_REQUIRED = "הודעה היא שדה חובה"
MESSAGE_TOO_SHORT = "הודעה חייבת להכיל לפחות 10 תווים"


class ContactFormData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    email: str
    project_type: str = Field(alias="projectType")
    message: str
    selected_package: Optional[str] = Field(default=None, alias="selectedPackage")


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def _present_string(value: Any) -> bool:
    # empty strings count as missing
    return isinstance(value, str) and bool(value)


def validate_contact_form(data: Any) -> ValidationResult:
    if not isinstance(data, dict):
        return ValidationResult(is_valid=False, errors=[INVALID_DATA])

    errors: List[str] = []

    name = data.get("name")
    if not _present_string(name):
        errors.append(NAME_REQUIRED)
    elif len(name.strip()) < MIN_NAME_LENGTH:
        errors.append(NAME_TOO_SHORT)

    email = data.get("email")
    if not _present_string(email):
        errors.append(EMAIL_REQUIRED)
    elif not EMAIL_PATTERN.fullmatch(email):
        errors.append(EMAIL_INVALID)

    if not _present_string(data.get("projectType")):
        errors.append(PROJECT_TYPE_REQUIRED)

    message = data.get("message")
    if not _present_string(message):
        errors.append(MESSAGE_REQUIRED)
    elif len(message.strip()) < MIN_MESSAGE_LENGTH:
        errors.append(MESSAGE_TOO_SHORT)

    return ValidationResult(is_valid=not errors, errors=errors)


def _package_supplied(value: Any) -> bool:
    # JSON objects and arrays count as supplied even when empty
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def build_contact_form(data: dict) -> ContactFormData:
    """Sanitize a validated payload. Callers must run validate_contact_form first."""
    selected = data.get("selectedPackage")
    return ContactFormData(
        name=sanitize_input(str(data["name"])),
        email=sanitize_input(str(data["email"])),
        project_type=sanitize_input(str(data["projectType"])),
        message=sanitize_input(str(data["message"])),
        selected_package=sanitize_input(_as_text(selected)) if _package_supplied(selected) else None,
    )
