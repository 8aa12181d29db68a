import os
from jose import jwt, JWTError
from datetime import datetime, timedelta
from fastapi import Request
from .errors import Unauthorized

# Prefer JWT_SECRET but support legacy JWT_SECRET_KEY for compatibility
SECRET = os.getenv('JWT_SECRET') or os.getenv('JWT_SECRET_KEY', 'devsecret')
ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', str(60 * 24 * 7)))

def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({'exp': expire})
    encoded = jwt.encode(to_encode, SECRET, algorithm=ALGORITHM)
    return encoded

def decode_token(token: str):
    try:
        payload = jwt.decode(token, SECRET, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None

def token_from_request(request: Request):
    authorization = request.headers.get('Authorization')
    if authorization and authorization.lower().startswith('bearer '):
        return authorization[len('Bearer '):].strip()
    # legacy clients send the raw token in x-auth-token
    return request.headers.get('x-auth-token')

def user_id_from_payload(payload: dict):
    user_id = payload.get('id')
    if user_id is None and isinstance(payload.get('user'), dict):
        user_id = payload['user'].get('id')
    return str(user_id) if user_id is not None else None

async def get_current_user(request: Request) -> dict:
    """Resolve the bearer token to the authenticated user"""
    token = token_from_request(request)
    if not token:
        raise Unauthorized('No token, authorization denied')

    payload = decode_token(token)
    user_id = user_id_from_payload(payload) if payload else None
    if not user_id:
        raise Unauthorized('Token is not valid')

    return {'id': user_id}
