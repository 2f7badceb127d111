"""Password hashing service using bcrypt.

Provides secure password hashing and verification with
strength validation.
"""

import re

import bcrypt

from mindwell_auth.exceptions import WeakPasswordError

_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"\d")


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt with a fresh salt per call, so hashing the same password
    twice yields two different hashes that both verify.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("Passw0rd")
    >>> service.verify("Passw0rd", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    # Password requirements
    MIN_LENGTH = 8
    MAX_LENGTH = 128

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12.
            Tests may lower it to bcrypt's minimum of 4.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        self.validate_strength(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Never raises: malformed hashes or inputs simply do not verify.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError, AttributeError):
            # Invalid hash format
            return False

    def validate_strength(self, password: str) -> None:
        """Validate that a password meets strength requirements.

        Current requirements:
        - Between 8 and 128 characters
        - At least one lowercase letter, one uppercase letter and one digit

        Parameters
        ----------
        password
            The password to validate

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters long"
            raise WeakPasswordError(msg)

        if len(password) > self.MAX_LENGTH:
            msg = f"Password cannot exceed {self.MAX_LENGTH} characters"
            raise WeakPasswordError(msg)

        if not (
            _LOWER.search(password)
            and _UPPER.search(password)
            and _DIGIT.search(password)
        ):
            msg = (
                "Password must contain at least one uppercase letter, "
                "one lowercase letter, and one number"
            )
            raise WeakPasswordError(msg)
