"""libcred generate-key — Print a fresh Fernet key."""

from cryptography.fernet import Fernet
from rich.console import Console

console = Console()


def generate_key():
    """Generate a URL-safe base64 Fernet key.

    Example:
        export LIBCRED_SECRET_ENCRYPTION_KEY=$(libcred generate-key)
    """
    console.print(Fernet.generate_key().decode(), highlight=False, soft_wrap=True)
