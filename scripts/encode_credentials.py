# scripts/encode_credentials.py
"""Print a service-account key file as a SERVICE_ACCOUNT_CREDENTIALS value.

Usage: python scripts/encode_credentials.py path/to/key.json
"""
import base64
import sys
from pathlib import Path

from api.credentials import load_service_account_info


def encode_key_file(path: Path) -> str:
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    # Round-trip through the loader the service uses.
    info = load_service_account_info(encoded)
    if "client_email" not in info or "private_key" not in info:
        raise ValueError(f"{path} does not look like a service-account key")
    return encoded


if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit(__doc__)
    print(f"SERVICE_ACCOUNT_CREDENTIALS={encode_key_file(Path(sys.argv[1]))}")
