"""Identity Generator — prefixed, practically-unique identifiers for new entities.

Invariants:
    - Output format is "<prefix>-<token>"
    - Never returns the same value twice within a process (uuid4 entropy)

Design Decisions:
    - uuid4 when the OS provides randomness; epoch-ms + random float otherwise
      (uniqueness is then only "practically unique within one session")
"""

import random
import time
import uuid


def create_id(prefix: str) -> str:
    """Return a new identifier like 'code-5b0c…'."""
    try:
        token = str(uuid.uuid4())
    except NotImplementedError:
        # os.urandom has no source on this platform
        token = f"{int(time.time() * 1000)}-{random.random()}"
    return f"{prefix}-{token}"
