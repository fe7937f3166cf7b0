import pytest

from cleancsv.emails import (
    check_email,
    is_valid_email,
    remove_invalid_emails,
    validate_emails,
)


# -------------------------------------------------------------------
# check_email
# -------------------------------------------------------------------


@pytest.mark.parametrize(
    "email",
    [
        "test@example.com",
        "user.name@domain.org",
        "user+tag@example.co.uk",
        "  Mixed.Case@Example.COM  ",
        "o'brien@my-host.io",
    ],
)
def test_valid_addresses(email):
    assert check_email(email) is None
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email, reason",
    [
        ("", "Empty email"),
        ("   ", "Empty email"),
        ("testexample.com", "Missing @"),
        ("test@@example.com", "Multiple @ symbols"),
        ("a@b@c.com", "Multiple @ symbols"),
        ("@example.com", "Missing local part"),
        ("a" * 65 + "@example.com", "Local part too long"),
        (".test@example.com", "Local part cannot start or end with dot"),
        ("test.@example.com", "Local part cannot start or end with dot"),
        ("test..user@example.com", "Consecutive dots in local part"),
        ("test@", "Missing domain"),
        ("test@" + "a" * 250 + ".com", "Domain too long"),
        ("test@example", "Missing TLD"),
        ("test@.example.com", "Domain cannot start or end with dot"),
        ("test@example.com.", "Domain cannot start or end with dot"),
        ("test@example..com", "Consecutive dots in domain"),
        ("test@example.c", "Invalid TLD"),
        ("test@" + "a" * 64 + ".com", "Invalid domain label length"),
        ("test@-example.com", "Invalid domain format"),
        ("test@exa_mple.com", "Invalid domain format"),
        ("te st@example.com", "Invalid characters in local part"),
        ("te(st)@example.com", "Invalid characters in local part"),
        # Quoted CSV cells can carry newlines and non-ASCII letters.
        ("ab\n@example.com", "Invalid characters in local part"),
        ("ab@exa\n.com", "Invalid domain format"),
        ("ab@ſx.com", "Invalid domain format"),
        ("jörg@example.com", "Invalid characters in local part"),
    ],
)
def test_invalid_reasons(email, reason):
    assert check_email(email) == reason


def test_local_checks_run_before_domain_checks():
    # Both parts are broken; the local part is reported.
    assert check_email(".x@example") == "Local part cannot start or end with dot"


def test_none_is_empty():
    assert check_email(None) == "Empty email"


# -------------------------------------------------------------------
# validate_emails
# -------------------------------------------------------------------


def test_validate_emails_mixed():
    rows = [
        {"email": "valid@example.com"},
        {"email": "invalid"},
        {"email": "also.valid@test.org"},
        {"email": "test@@double.com"},
    ]

    result = validate_emails(rows, "email")

    assert result.valid_count == 2
    assert result.invalid_count == 2
    assert result.valid_count + result.invalid_count == len(rows)
    assert result.invalid_reasons == {1: "Missing @", 3: "Multiple @ symbols"}
    assert result.invalid == [rows[1], rows[3]]


def test_validate_emails_keeps_original_values():
    rows = [{"email": "  USER@Example.com "}]

    result = validate_emails(rows, "email")

    assert result.valid == [{"email": "  USER@Example.com "}]


def test_validate_emails_missing_column_is_empty():
    rows = [{"name": "a"}, {"name": "b"}]

    result = validate_emails(rows, "email")

    assert result.invalid_reasons == {0: "Empty email", 1: "Empty email"}


# -------------------------------------------------------------------
# remove_invalid_emails
# -------------------------------------------------------------------


def test_remove_invalid_emails_preserves_order():
    rows = [
        {"email": "valid@example.com", "name": "John"},
        {"email": "invalid", "name": "Jane"},
        {"email": "another@test.org", "name": "Bob"},
    ]

    result = remove_invalid_emails(rows, "email")

    assert [r["name"] for r in result.data] == ["John", "Bob"]
    assert result.original_count == 3
    assert result.new_count == 2
    assert result.removed_count == 1
    assert result.message == "1 invalid email removed"


def test_remove_invalid_emails_all_valid():
    rows = [{"email": "valid@example.com"}, {"email": "another@test.org"}]

    result = remove_invalid_emails(rows, "email")

    assert result.removed_count == 0
    assert result.message == "All emails are valid"


def test_remove_invalid_emails_plural_message():
    rows = [{"email": "valid@example.com"}, {"email": "invalid1"}, {"email": "invalid2"}]

    assert remove_invalid_emails(rows, "email").message == "2 invalid emails removed"
