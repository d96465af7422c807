"""API key validation for the admin cache endpoints."""

import hmac


class APIKeyValidator:
    """Validates the X-API-Key header against the configured admin keys."""

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with the accepted keys.

        Args:
            api_keys: Accepted API key strings

        Raises:
            ValueError: If api_keys is empty
        """
        if not api_keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = frozenset(api_keys)

    def validate(self, api_key: str) -> bool:
        """Check an API key with a constant-time comparison per configured key.

        Args:
            api_key: The API key to validate

        Returns:
            bool: True if valid, False otherwise
        """
        return any(hmac.compare_digest(api_key, key) for key in self.api_keys)
