"""Token minting shared by the hook service and the admin CLI."""

import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import field

import logfire

from hookforge.domain.shared.service import Service

logger = logging.getLogger(__name__)

# 16 bytes = 32 hex chars
RANDOM_BYTES = 16


class TokenGenerator(Service):
    """Generates secret tokens for hooks and for the server admin.

    Token format: ``<hex nanosecond timestamp>-<hex random component>``.
    The random component comes from the OS CSPRNG. If that source fails the
    timestamp itself is used instead, so token generation never raises.
    """

    random_bytes: Callable[[int], bytes] = field(default=secrets.token_bytes)
    clock_ns: Callable[[], int] = field(default=time.time_ns)

    def generate(self) -> str:
        timestamp = self.clock_ns()

        try:
            random_part = self.random_bytes(RANDOM_BYTES)
        except (OSError, NotImplementedError) as e:
            logger.error("Failed to generate random bytes for token: %s", e)
            logfire.error("Token entropy source failed", error=str(e))
            random_part = f"{timestamp:016x}".encode()

        return f"{timestamp:x}-{random_part.hex()}"
