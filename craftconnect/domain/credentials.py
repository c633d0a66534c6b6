"""
Credential hasher - bcrypt password hashing and verification.

Verification always runs one bcrypt comparison, against a dummy hash of
the configured cost when no usable stored hash is available, so that a
missing account, an oversize password and a wrong password all cost the
same time.
"""

import bcrypt

# bcrypt only looks at this many bytes of input
MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol with bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, cost: int = 10) -> None:
        self._cost = cost
        # Compared against when there is no real hash to check
        self._dummy_hash = bcrypt.hashpw(
            b"dummy_password_for_timing_safety", bcrypt.gensalt(rounds=cost)
        )

    def hash(self, password: str) -> str:
        """
        Raises:
            ValueError: If password is longer than 72 bytes when encoded
        """
        encoded = password.encode()
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._cost)).decode()

    def verify(self, password: str, password_hash: str | None) -> bool:
        encoded = password.encode()
        if password_hash is None or len(encoded) > MAX_PASSWORD_BYTES:
            bcrypt.checkpw(encoded[:MAX_PASSWORD_BYTES], self._dummy_hash)
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode())
        except ValueError:
            # Stored value is not a bcrypt hash
            return False
