import pytest

from gh2addrs.validation import is_email, is_valid_email

CASES = [
    ("user@example.com", True),
    ("test.user@sub.example.com", True),
    ("user+tag@example.com", True),
    ("first.last@example.com", True),
    ("invalid", False),
    ("@example.com", False),
    ("user@", False),
    ("user@example", False),
    ("", False),
    ("[email]", False),
    ("user..name@example.com", False),
    (".user@example.com", False),
    ("user.@example.com", False),
    ("user name@example.com", False),
]


@pytest.mark.parametrize(("email", "expected"), CASES)
def test_is_valid_email(email, expected):
    assert is_valid_email(email) is expected


@pytest.mark.parametrize(("email", "expected"), CASES)
def test_is_email_matches(email, expected):
    assert is_email(email) is expected


def test_noreply_is_rejected_case_insensitively():
    assert is_valid_email("NoReply@example.com") is False


def test_display_name_form_is_accepted():
    assert is_valid_email("Jane Doe <jane@example.com>") is True


def test_display_name_with_bad_address_is_rejected():
    assert is_valid_email("Jane Doe <jane@example>") is False


def test_local_part_length_limit():
    assert is_valid_email("a" * 64 + "@example.com") is True
    assert is_valid_email("a" * 65 + "@example.com") is False


def test_domain_label_length_limit():
    assert is_valid_email("user@" + "a" * 63 + ".example.com") is True
    assert is_valid_email("user@" + "a" * 64 + ".example.com") is False


def test_two_at_signs_rejected():
    assert is_valid_email("user@host@example.com") is False


def test_quoted_local_part_with_at_sign_rejected():
    assert is_valid_email('"a@b"@example.com') is False


def test_quoted_local_part_accepted():
    assert is_valid_email('"john"@example.com') is True