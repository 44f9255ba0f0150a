import base64
import hashlib


ID_LENGTH = 6
UNIT_SEPARATOR = "\x1f"


def generate_id(text, context=None):
    """
    Stable short id for a canonical message text and its context.

    A missing context and an empty context give the same id.
    """
    digest = hashlib.sha256(
        f"{text}{UNIT_SEPARATOR}{context or ''}".encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")[:ID_LENGTH]
