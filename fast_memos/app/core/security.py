"""
Security helpers for password hashing and JWT authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism using
HMAC-SHA256 signatures and base64url encoding.  Tokens carry a fixed set
of claims (:class:`TokenClaims`): the subject user id, the issue time and
the expiration timestamp.  Helper functions are also provided for hashing
passwords using PBKDF2-HMAC with SHA-256, along with salt generation and
verification.
"""

import base64
import hashlib
import hmac
import json
import math
import os
import time
from dataclasses import asdict, dataclass
from typing import Optional

from .errors import AuthError

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


@dataclass(frozen=True)
class TokenClaims:
    """Claims embedded in every access token."""

    sub: str
    iat: int
    exp: int


class TokenService:
    """Issue and validate HS256 bearer tokens.

    Parameters
    ----------
    secret_key : str
        Key used to sign and verify tokens.
    expire_minutes : int
        Default token lifetime.  72 hours unless configured otherwise.
    algorithm : str
        Only ``"HS256"`` is supported.
    """

    algorithm = "HS256"

    def __init__(self, secret_key: str, expire_minutes: int = 72 * 60, algorithm: str = "HS256") -> None:
        if algorithm != self.algorithm:
            raise ValueError(f"Unsupported token algorithm: {algorithm}")
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.secret_key = secret_key
        self.expire_minutes = expire_minutes

    def issue(self, user_id: str, expires_delta: Optional[int] = None) -> str:
        """Create a signed token for ``user_id``.

        The token is a string of the form ``header.payload.signature``,
        where each part is base64url encoded.  Clients send it in the
        ``Authorization`` header as ``Bearer <token>``.

        Parameters
        ----------
        user_id : str
            Subject of the token.
        expires_delta : Optional[int]
            Lifetime of the token in seconds.  Defaults to
            ``expire_minutes * 60``.
        """
        now = int(time.time())
        lifetime = self.expire_minutes * 60 if expires_delta is None else expires_delta
        claims = TokenClaims(sub=user_id, iat=now, exp=now + lifetime)
        header = {"alg": self.algorithm, "typ": "JWT"}
        header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
        payload_b64 = _b64_url_encode(json.dumps(asdict(claims), separators=(",", ":")).encode("utf-8"))
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        signature_b64 = _b64_url_encode(_sign(signing_input, self.secret_key))
        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def decode(self, token: str) -> TokenClaims:
        """Verify ``token`` and return its claims.

        Raises
        ------
        AuthError
            If the token is malformed, signed with an unexpected algorithm
            or a different key, expired, or lacks a string subject.
        """
        parts = token.split(".")
        if len(parts) != 3:
            raise AuthError("Malformed token")
        header_b64, payload_b64, signature_b64 = parts
        try:
            header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
            actual_sig = _b64_url_decode(signature_b64)
            payload = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        except ValueError as exc:
            raise AuthError("Malformed token") from exc
        if not isinstance(header, dict) or header.get("alg") != self.algorithm:
            raise AuthError("Unexpected signing method")

        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, self.secret_key)
        # Constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            raise AuthError("Invalid token signature")

        if not isinstance(payload, dict):
            raise AuthError("Malformed token")
        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise AuthError("Token has no expiry")
        try:
            exp = int(exp)
        except (OverflowError, ValueError) as exc:
            # inf and NaN survive json.loads but have no integer value.
            raise AuthError("Token has no expiry") from exc
        if exp < int(time.time()):
            raise AuthError("Token expired")
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise AuthError("Token subject is missing or not a string")
        iat = payload.get("iat", 0)
        if isinstance(iat, bool) or not isinstance(iat, (int, float)) or not math.isfinite(iat):
            iat = 0
        return TokenClaims(sub=sub, iat=int(iat), exp=exp)

    def validate(self, token: str) -> str:
        """Return the user id carried by a valid token."""
        return self.decode(token).sub


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The result
    contains the salt and hash separated by ``$`` (salt in hex, then hash
    in hex).
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string.

    Returns ``False`` for a wrong password and for a stored value that is
    not in ``salthex$hashhex`` form.
    """
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
