#!/usr/bin/env python3
"""Streaming BLAKE2b example.

Hashes a file in fixed-size chunks, optionally keyed and salted from the
environment (see :meth:`blake2mac.config.MacConfig.from_environment`).

    python examples/hash_file.py some.iso
    BLAKE2MAC_KEY=000102 BLAKE2MAC_DIGEST_LENGTH=32 python examples/hash_file.py some.iso
"""

import logging
import sys
from pathlib import Path

# Add the parent directory to the path so we can import blake2mac
sys.path.insert(0, str(Path(__file__).parent.parent))

from blake2mac import Blake2bMac, InvalidConfigurationError
from blake2mac.config import MacConfig

CHUNK_SIZE = 64 * 1024


def hash_file(path: Path, config: MacConfig) -> str:
    """Return the hex digest of ``path`` under ``config``."""
    with Blake2bMac.from_config(config) as mac, path.open("rb") as f:
        while True:
            chunk = f.read(CHUNK_SIZE)
            if not chunk:
                break
            mac.update_block(chunk)
        return mac.hexdigest()


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO)

    if len(argv) != 2:
        print(f"usage: {argv[0]} FILE", file=sys.stderr)
        return 2

    try:
        config = MacConfig.from_environment()
    except InvalidConfigurationError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 2

    path = Path(argv[1])
    print(f"{hash_file(path, config)}  {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
