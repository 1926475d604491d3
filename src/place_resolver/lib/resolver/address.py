"""Address normalization and API key masking."""


def normalize_address(address: str | None) -> str:
    """Normalize a raw address into its cache-key form.

    Trims surrounding whitespace and lowercases, so case and whitespace
    variants of the same address collapse to one cache row.

    Args:
        address: Raw input address.

    Returns:
        Normalized address, or an empty string for blank input.
    """
    if not address:
        return ""
    return address.strip().lower()


def is_blank(value: str | None) -> bool:
    """Return True for None, empty, or whitespace-only strings."""
    return value is None or not value.strip()


def mask_api_key(api_key: str | None) -> str:
    """Mask an API key for diagnostic output (first 4 / last 4 characters).

    Args:
        api_key: The secret key.

    Returns:
        Masked key, or ``[INVALID_KEY]`` for keys shorter than 8 characters.
    """
    if not api_key or len(api_key) < 8:
        return "[INVALID_KEY]"
    return f"{api_key[:4]}...{api_key[-4:]}"
