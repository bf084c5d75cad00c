from core.database import SessionLocal
from typing import Annotated, Optional
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from starlette import status
from core.config import settings
from services.data_client import DataClient
from services.order_repository import OrderRepository


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]


def get_data_client(db: db_dependency) -> DataClient:
    return DataClient(db)

data_client_dependency = Annotated[DataClient, Depends(get_data_client)]


def get_order_repository(client: data_client_dependency) -> OrderRepository:
    # Cached per request by FastAPI, so every view in a request shares it
    return OrderRepository(client)

repository_dependency = Annotated[OrderRepository, Depends(get_order_repository)]


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def decode_access_token(token: str) -> dict:
    """
    Verify an access token minted by the auth service and return the
    caller as ``{"email", "user_id", "user_role"}``.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Could not validate credentials.")

    email: str = payload.get("sub")
    user_id = payload.get("id")
    user_role: str = payload.get("role")
    token_type: str = payload.get("type")

    if email is None or user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Could not validate credentials.")

    if token_type != "access":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Invalid token type. Access token required.")

    return {"email": email, "user_id": str(user_id), "user_role": user_role}


def get_current_user(token: Annotated[Optional[str], Depends(oauth2_scheme)]):
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Not authenticated",
                            headers={"WWW-Authenticate": "Bearer"})
    return decode_access_token(token)

user_dependency = Annotated[dict, Depends(get_current_user)]


def get_optional_user(token: Annotated[Optional[str], Depends(oauth2_scheme)]):
    """
    The caller if a token was sent, None for anonymous visitors. A token
    that is sent but invalid is still rejected.
    """
    if not token:
        return None
    return decode_access_token(token)

optional_user_dependency = Annotated[Optional[dict], Depends(get_optional_user)]


def require_admin(user: user_dependency):
    if user.get("user_role") != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="Admin access required")
    return user

admin_dependency = Annotated[dict, Depends(require_admin)]
