"""Account naming policy."""


def normalize_account_name(name: str | None) -> str:
    """Return the trimmed account name ("" when blank).

    Args:
        name: Raw name entered by an operator.

    Returns:
        str: Name without surrounding whitespace.
    """
    if not name:
        return ""
    return name.strip()


def is_valid_account_name(name: str | None) -> bool:
    """Return True when the name can be committed."""
    return bool(normalize_account_name(name))


__all__ = ["normalize_account_name", "is_valid_account_name"]
