"""E-mail address validation used to filter discovered addresses."""

from __future__ import annotations

import string

_ATEXT = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-/=?^_`{|}~")
_MAX_LOCAL_LENGTH = 64
_MAX_DOMAIN_LENGTH = 255
_MAX_LABEL_LENGTH = 63


def _is_atext(char: str) -> bool:
    return char in _ATEXT or ord(char) > 127


def _is_atom(text: str) -> bool:
    return bool(text) and all(_is_atext(char) for char in text)


def _is_dot_atom(text: str) -> bool:
    return all(_is_atom(part) for part in text.split("."))


def _consume_quoted(text: str) -> tuple[str, str] | None:
    """Read a quoted string at the start of ``text``.

    Returns the unescaped content and the remaining text, or None when the
    quoted string is malformed or empty.
    """
    if not text.startswith('"'):
        return None
    content: list[str] = []
    chars = iter(enumerate(text[1:], start=1))
    for position, char in chars:
        if char == "\\":
            escaped = next(chars, None)
            if escaped is None:
                return None
            content.append(escaped[1])
        elif char == '"':
            if not content:
                return None
            return "".join(content), text[position + 1 :]
        elif char in "\r\n" or (ord(char) < 32 and char != "\t") or ord(char) == 127:
            return None
        else:
            content.append(char)
    return None


def _parse_domain(domain: str) -> str | None:
    if domain.startswith("[") and domain.endswith("]"):
        inner = domain[1:-1]
        if all(33 <= ord(c) <= 126 and c not in "[]\\" for c in inner):
            return domain
        return None
    return domain if _is_dot_atom(domain) else None


def _parse_addr_spec(spec: str) -> str | None:
    """Parse a bare addr-spec and return the normalised address."""
    if spec.startswith('"'):
        consumed = _consume_quoted(spec)
        if consumed is None:
            return None
        local, rest = consumed
        if not rest.startswith("@"):
            return None
        domain_text = rest[1:]
    else:
        local, at, domain_text = spec.partition("@")
        if not at or not _is_dot_atom(local):
            return None
    domain = _parse_domain(domain_text)
    if domain is None:
        return None
    return f"{local}@{domain}"


def _is_phrase(text: str) -> bool:
    """Check that a display name is a sequence of words or quoted strings."""
    rest = text.strip(" \t")
    while rest:
        if rest.startswith('"'):
            consumed = _consume_quoted(rest)
            if consumed is None:
                return False
            rest = consumed[1]
        else:
            end = len(rest)
            for position, char in enumerate(rest):
                if char in ' \t"':
                    end = position
                    break
            word = rest[:end]
            if not all(_is_atext(c) or c == "." for c in word):
                return False
            rest = rest[end:]
        rest = rest.lstrip(" \t")
    return True


def _parse_address(text: str) -> str | None:
    """Parse a single RFC 5322 address, with or without a display name."""
    text = text.strip(" \t\r\n")
    if not text:
        return None
    address = _parse_addr_spec(text)
    if address is not None:
        return address
    if not text.endswith(">"):
        return None
    opening = text.rfind("<")
    if opening < 0 or not _is_phrase(text[:opening]):
        return None
    return _parse_addr_spec(text[opening + 1 : -1].strip(" \t"))


def is_valid_email(email: str) -> bool:
    """Return True if ``email`` looks like a real, deliverable address."""
    if not email:
        return False
    if ".." in email or email.startswith(".") or email.endswith("."):
        return False
    if "noreply" in email.lower():
        return False

    address = _parse_address(email)
    if address is None:
        return False

    parts = address.split("@")
    if len(parts) != 2:
        return False
    local_part, domain = parts

    if not 0 < len(local_part.encode()) <= _MAX_LOCAL_LENGTH:
        return False
    if not 0 < len(domain.encode()) <= _MAX_DOMAIN_LENGTH:
        return False
    if "." not in domain:
        return False
    return all(0 < len(label.encode()) <= _MAX_LABEL_LENGTH for label in domain.split("."))


def is_email(s: str) -> bool:
    """Alias of :func:`is_valid_email`."""
    return is_valid_email(s)