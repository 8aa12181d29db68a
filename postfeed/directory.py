"""
User Directory
Read-only view of user profiles owned by the users module.
Posts only need a display name and an avatar from it.
"""
from typing import Any, Dict, Optional

from .store import parse_object_id


class UserDirectory:
    async def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return {'name', 'avatar'} for the user, or None"""
        raise NotImplementedError


class MongoUserDirectory(UserDirectory):
    def __init__(self, collection):
        self.collection = collection

    async def get(self, user_id):
        # users created by the users module have ObjectId keys, imported ones may not
        key = parse_object_id(user_id) or user_id
        user = await self.collection.find_one({'_id': key}, {'name': 1, 'avatar': 1})
        if not user:
            return None
        return {'name': user.get('name'), 'avatar': user.get('avatar')}


class InMemoryUserDirectory(UserDirectory):
    def __init__(self, users: Dict[str, Dict[str, Any]] = None):
        self.users = dict(users or {})

    def add(self, user_id: str, name: str, avatar: str = None):
        self.users[user_id] = {'name': name, 'avatar': avatar}

    async def get(self, user_id):
        user = self.users.get(user_id)
        if not user:
            return None
        return {'name': user.get('name'), 'avatar': user.get('avatar')}
