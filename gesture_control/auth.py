"""
Authentication for the gesture log backend
"""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours


def get_password_hash(password: str, salt: str) -> str:
    """Hash password with a per-user salt"""
    return hashlib.sha256((salt + password).encode()).hexdigest()


class AuthService:
    """In-memory users and signed access tokens."""

    def __init__(self, secret_key: Optional[str] = None):
        self.secret_key = secret_key or secrets.token_urlsafe(32)
        self.users_db = {}

    def register(self, username: str, password: str) -> Optional[dict]:
        """Create a user. Returns None if the name is taken."""
        if username in self.users_db:
            return None

        salt = secrets.token_hex(8)
        self.users_db[username] = {
            "username": username,
            "salt": salt,
            "hashed_password": get_password_hash(password, salt),
            "created_at": datetime.now(timezone.utc).isoformat()
        }
        return self.users_db[username]

    def authenticate(self, username: str, password: str) -> Optional[dict]:
        user = self.users_db.get(username)
        if user is None:
            return None
        expected = user["hashed_password"]
        if not secrets.compare_digest(get_password_hash(password, user["salt"]), expected):
            return None
        return user

    def create_access_token(self, username: str, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
        expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
        to_encode = {"sub": username, "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def verify_token(self, token: Optional[str]) -> Optional[str]:
        """Return the user id a token was issued to, or None if it is invalid."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError:
            return None
        username = payload.get("sub")
        if username is None or username not in self.users_db:
            return None
        return username
