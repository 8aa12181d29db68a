from fastapi import Request
import logging

from .directory import UserDirectory
from .errors import PostError
from .store import PostStore

logger = logging.getLogger(__name__)


async def get_post_store(request: Request) -> PostStore:
    """Get post store from app state"""
    store = getattr(request.app.state, 'post_store', None)
    if store is None:
        logger.error('Post store unavailable, MongoDB was not connected at startup')
        raise PostError()
    return store


async def get_user_directory(request: Request) -> UserDirectory:
    """Get user directory from app state"""
    users = getattr(request.app.state, 'user_directory', None)
    if users is None:
        logger.error('User directory unavailable, MongoDB was not connected at startup')
        raise PostError()
    return users
