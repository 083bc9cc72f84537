"""Keys that must never reach the logs verbatim.

Streamed node content is user-facing model output and may echo whatever the
user typed, so it is treated the same way as credentials.
"""

# Matched as case-insensitive substrings of structured-log keys
SENSITIVE_KEYS: set[str] = {
    # Streamed graph content
    "content",
    "chunk",
    "fragment",
    "final_output",
    "final_message",
    "message_body",
    "raw_text",
    # Credentials that may ride along in node metadata or env
    "password",
    "secret",
    "token",
    "api_key",
    "authorization",
    "bearer",
    "cookie",
    # Personal data
    "email",
    "phone",
    "address",
}


def is_sensitive_key(key: str) -> bool:
    """Check if a key should be considered sensitive and redacted.

    Args:
        key: The key name to check

    Returns:
        True if the key should be redacted, False otherwise
    """
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)
