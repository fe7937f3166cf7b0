"""
Email validation and invalid-email removal.

Validation is a simplified RFC 5322 check. Checks run in a fixed order on
the trimmed, lower-cased value and the first failing one gives the reason:

    Empty email
    Missing @ / Multiple @ symbols
    Missing local part / Local part too long
    Local part cannot start or end with dot / Consecutive dots in local part
    Missing domain / Domain too long / Missing TLD
    Domain cannot start or end with dot / Consecutive dots in domain
    Invalid TLD / Invalid domain label length / Invalid domain format
    Invalid characters in local part
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from .records import OperationResult, Row, cell, pluralize

MAX_LOCAL_LENGTH = 64
MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63

_LABEL_RE = re.compile(r"[a-z0-9]([a-z0-9-]*[a-z0-9])?", re.IGNORECASE | re.ASCII)
_LOCAL_RE = re.compile(r"[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+")


@dataclass(frozen=True)
class EmailValidationResult:
    valid: List[Row] = field(default_factory=list)
    invalid: List[Row] = field(default_factory=list)
    invalid_reasons: Dict[int, str] = field(default_factory=dict)

    @property
    def valid_count(self) -> int:
        return len(self.valid)

    @property
    def invalid_count(self) -> int:
        return len(self.invalid)


def _check_local(local: str) -> Optional[str]:
    if not local:
        return "Missing local part"
    if len(local) > MAX_LOCAL_LENGTH:
        return "Local part too long"
    if local.startswith(".") or local.endswith("."):
        return "Local part cannot start or end with dot"
    if ".." in local:
        return "Consecutive dots in local part"
    return None


def _check_domain(domain: str) -> Optional[str]:
    if not domain:
        return "Missing domain"
    if len(domain) > MAX_DOMAIN_LENGTH:
        return "Domain too long"
    if "." not in domain:
        return "Missing TLD"
    if domain.startswith(".") or domain.endswith("."):
        return "Domain cannot start or end with dot"
    if ".." in domain:
        return "Consecutive dots in domain"

    labels = domain.split(".")
    if len(labels[-1]) < 2:
        return "Invalid TLD"
    for label in labels:
        if not label or len(label) > MAX_LABEL_LENGTH:
            return "Invalid domain label length"
    for label in labels:
        if not _LABEL_RE.fullmatch(label):
            return "Invalid domain format"
    return None


def check_email(value: Optional[str]) -> Optional[str]:
    """
    Validate a single address.

    Returns:
        None if the address is valid, otherwise the reason it is not.
    """
    if value is None or not value.strip():
        return "Empty email"

    email = value.strip().lower()

    at_count = email.count("@")
    if at_count == 0:
        return "Missing @"
    if at_count > 1:
        return "Multiple @ symbols"

    local, domain = email.split("@")

    reason = _check_local(local) or _check_domain(domain)
    if reason:
        return reason

    if not _LOCAL_RE.fullmatch(local):
        return "Invalid characters in local part"
    return None


def is_valid_email(value: Optional[str]) -> bool:
    return check_email(value) is None


def validate_emails(rows: Sequence[Mapping[str, str]], column: str) -> EmailValidationResult:
    """
    Split rows into valid and invalid by the address in `column`.

    `invalid_reasons` is keyed by the row's index in `rows`.
    """
    result = EmailValidationResult()

    for index, row in enumerate(rows):
        reason = check_email(cell(row, column))
        if reason is None:
            result.valid.append(dict(row))
        else:
            result.invalid.append(dict(row))
            result.invalid_reasons[index] = reason

    return result


def remove_invalid_emails(rows: Sequence[Mapping[str, str]], column: str) -> OperationResult:
    """Keep only rows whose `column` holds a valid address, in order."""
    result = validate_emails(rows, column)

    if result.invalid_count:
        message = f"{pluralize(result.invalid_count, 'invalid email')} removed"
    else:
        message = "All emails are valid"

    return OperationResult(
        data=result.valid,
        original_count=len(rows),
        new_count=result.valid_count,
        removed_count=result.invalid_count,
        modified_count=0,
        message=message,
    )
