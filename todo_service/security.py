"""Todo Service — password hashing and token issuance."""

import time
from typing import Optional

import bcrypt
import jwt
from fastapi.concurrency import run_in_threadpool

from todo_service.config import SECRET_KEY, TOKEN_EXPIRY_SECONDS

BCRYPT_ROUNDS = 10
TOKEN_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def check_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


async def hash_password_async(password: str) -> str:
    """bcrypt is CPU bound; keep it off the event loop."""
    return await run_in_threadpool(hash_password, password)


async def check_password_async(password: str, hashed: str) -> bool:
    return await run_in_threadpool(check_password, password, hashed)


def create_token(email: str, username: str, user_id: Optional[str] = None) -> str:
    issued_at = int(time.time())
    payload = {
        "email": email,
        "username": username,
        "iat": issued_at,
        "exp": issued_at + TOKEN_EXPIRY_SECONDS,
    }
    if user_id is not None:
        payload["id"] = user_id
    return jwt.encode(payload, SECRET_KEY, algorithm=TOKEN_ALGORITHM)
