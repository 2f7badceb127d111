"""JWT token service.

Provides signed session token creation and verification.
"""

from datetime import datetime, timedelta, timezone

import jwt

from mindwell_auth.exceptions import InvalidTokenError, TokenExpiredError
from mindwell_auth.schemas import CLAIMS_VERSION, TokenClaims


class JWTService:
    """Service for session token creation and verification.

    Tokens are tamper-evident and carry their own expiry, but they are only
    authoritative when paired with a live session record (see
    ``SessionService``).

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_token("42", "ann@x.com", "patient", "sid")
    >>> claims = service.verify_token(token)
    >>> print(claims.user_id)
    42
    """

    DEFAULT_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        token_expire_days: int = DEFAULT_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        token_expire_days
            Days until a token expires (default 7)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expire = timedelta(days=token_expire_days)

    def create_token(  # noqa: PLR0913
        self,
        user_id: str,
        email: str,
        user_type: str,
        session_id: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed session token.

        Parameters
        ----------
        user_id
            The user's identifier (or guest id)
        email
            The user's email address
        user_type
            The user's type
        session_id
            Id of the session record this token is bound to
        expires_delta
            Custom expiration time (optional, defaults to the deployment TTL)

        Returns
        -------
        The encoded JWT token string
        """
        now = datetime.now(tz=timezone.utc)
        expire = now + (expires_delta or self._expire)

        payload = {
            "sub": str(user_id),
            "email": email,
            "user_type": user_type,
            "sid": session_id,
            "ver": CLAIMS_VERSION,
            "iat": now,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify_token(self, token: str) -> TokenClaims:
        """Verify and decode a session token.

        Parameters
        ----------
        token
            The JWT token string to verify

        Returns
        -------
        TokenClaims containing the decoded data

        Raises
        ------
        TokenExpiredError
            If the token's embedded expiry has passed
        InvalidTokenError
            If the token is invalid, tampered with, or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "exp"]},
            )

            if payload.get("ver") != CLAIMS_VERSION:
                msg = f"Unsupported claims version: {payload.get('ver')!r}"
                raise InvalidTokenError(msg)

            return TokenClaims(
                user_id=str(payload["sub"]),
                email=str(payload["email"]),
                user_type=str(payload["user_type"]),
                session_id=str(payload["sid"]),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                version=payload["ver"],
            )

        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e
