# backend/brain/services/link_generator.py

import secrets
import string

DEFAULT_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_LENGTH = 10

def generate_share_token(length: int = DEFAULT_LENGTH, alphabet: str = DEFAULT_ALPHABET) -> str:
    # uniform draw per character
    return "".join(secrets.choice(alphabet) for _ in range(length))
