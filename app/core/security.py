from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from app.core.config import Settings

def create_access_token(user_id: int, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    #crée un token signé, valable JWT_EXPIRE_DAYS jours par défaut
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_EXPIRE_DAYS)
    now = datetime.utcnow()
    payload = {
        "user_id": user_id,
        "iat": now,
        "exp": now + expires_delta,
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token

def verify_token(token: str, settings: Settings) -> Optional[dict]:
    # signature invalide ou token expiré => None
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        return None

def decode_token(token: str, settings: Settings) -> Optional[int]:
    payload = verify_token(token, settings)
    if payload is None:
        return None
    user_id = payload.get("user_id")
    if not isinstance(user_id, int):
        return None
    return user_id
