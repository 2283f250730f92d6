import secrets
import string

# Base62 alphabet, case-sensitive
ALPHABET = string.ascii_letters + string.digits
MIN_CODE_LENGTH = 6
MAX_CODE_LENGTH = 8
DEFAULT_CODE_LENGTH = 6


def generate_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """Generate a cryptographically secure random alphanumeric code.

    Availability is not checked here; the store's conditional insert
    reports collisions.
    """
    if not MIN_CODE_LENGTH <= length <= MAX_CODE_LENGTH:
        raise ValueError(
            f"code length must be between {MIN_CODE_LENGTH} and {MAX_CODE_LENGTH}, got {length}"
        )
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
