from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from jose import jwt, JWTError
from core.config import settings

def get_user_id(request: Request):
    """
    Rate-limit key: the JWT user id when a valid bearer token is present,
    the client address otherwise.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        try:
            payload = jwt.decode(auth_header[len("Bearer "):], settings.SECRET_KEY,
                                 algorithms=[settings.ALGORITHM])
            user_id = payload.get("id")
            if user_id:
                return f"user:{user_id}"
        except JWTError:
            pass

    return get_remote_address(request)

limiter = Limiter(
    key_func=get_user_id,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.ENV != "testing"
)
