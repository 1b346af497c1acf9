from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Header, HTTPException, status

from app.core.config import settings


ALGORITHM = "HS256"


def create_jwt(payload: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = payload.copy()
    if expires_delta is None:
        expires_delta = timedelta(hours=12)
    exp = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": exp})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_jwt(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


async def get_current_user(authorization: Optional[str] = Header(None)):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    # ERP tokens are sometimes stored with stray whitespace
    token = "".join(authorization.split(" ", 1)[1].split())
    payload = decode_jwt(token)
    uid = payload.get("sub")
    if not uid:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    employee_no = payload.get("employeeNo")
    if employee_no is not None and not str(employee_no).isdigit():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    return {
        "id": str(uid),
        "username": payload.get("username", ""),
        "role": str(payload.get("userType", "USER")).upper(),
        "employee_no": int(employee_no) if employee_no is not None else None,
        "token": token,
    }
