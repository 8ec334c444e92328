import random
import string
from typing import Container

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_game_code(existing: Container[str], length: int = 4) -> str:
    """Generate a short game code not present in ``existing``."""
    while True:
        code = ''.join(random.choices(CODE_ALPHABET, k=length))
        if code not in existing:
            return code
