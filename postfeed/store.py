"""
Post Store
Keyed storage for post documents, backed by MongoDB in production
and by an in-memory dict in tests
"""
import copy
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
import logging

logger = logging.getLogger(__name__)


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return an ObjectId for a well-formed id, None otherwise"""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class PostStore:
    """
    Storage interface used by the post operations.

    Besides plain document access the store exposes conditional list updates,
    so a like or comment change is a single atomic write instead of a
    read-modify-write of the whole post. Every method that takes an id returns
    None (or False) when the id is malformed or nothing matched.
    """

    async def create(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def find_by_id(self, post_id: Any) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def find_all(self) -> List[Dict[str, Any]]:
        """All posts, newest first"""
        raise NotImplementedError

    async def save(self, doc: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def delete(self, post_id: Any) -> bool:
        raise NotImplementedError

    async def add_like(self, post_id: Any, user_id: str) -> Optional[Dict[str, Any]]:
        """Prepend a like unless the user already liked the post"""
        raise NotImplementedError

    async def remove_like(self, post_id: Any, user_id: str) -> Optional[Dict[str, Any]]:
        """Remove the user's like if present"""
        raise NotImplementedError

    async def add_comment(self, post_id: Any, comment: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Prepend a comment"""
        raise NotImplementedError

    async def remove_comment(self, post_id: Any, comment_id: Any) -> Optional[Dict[str, Any]]:
        """Remove one comment by its own id if present"""
        raise NotImplementedError


class MongoPostStore(PostStore):
    """Post documents in a motor collection"""

    def __init__(self, collection):
        self.collection = collection

    async def create(self, doc):
        result = await self.collection.insert_one(doc)
        doc['_id'] = result.inserted_id
        return doc

    async def find_by_id(self, post_id):
        oid = parse_object_id(post_id)
        if oid is None:
            return None
        return await self.collection.find_one({'_id': oid})

    async def find_all(self):
        cursor = self.collection.find().sort('date', DESCENDING)
        return await cursor.to_list(length=None)

    async def save(self, doc):
        result = await self.collection.replace_one({'_id': doc['_id']}, doc)
        if result.matched_count == 0:
            return None
        return doc

    async def delete(self, post_id):
        oid = parse_object_id(post_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({'_id': oid})
        return result.deleted_count == 1

    async def _update(self, query, update):
        return await self.collection.find_one_and_update(
            query, update, return_document=ReturnDocument.AFTER
        )

    async def add_like(self, post_id, user_id):
        oid = parse_object_id(post_id)
        if oid is None:
            return None
        return await self._update(
            {'_id': oid, 'likes.user': {'$ne': user_id}},
            {'$push': {'likes': {'$each': [{'user': user_id}], '$position': 0}}},
        )

    async def remove_like(self, post_id, user_id):
        oid = parse_object_id(post_id)
        if oid is None:
            return None
        return await self._update(
            {'_id': oid, 'likes.user': user_id},
            {'$pull': {'likes': {'user': user_id}}},
        )

    async def add_comment(self, post_id, comment):
        oid = parse_object_id(post_id)
        if oid is None:
            return None
        return await self._update(
            {'_id': oid},
            {'$push': {'comments': {'$each': [comment], '$position': 0}}},
        )

    async def remove_comment(self, post_id, comment_id):
        oid = parse_object_id(post_id)
        comment_oid = parse_object_id(comment_id)
        if oid is None or comment_oid is None:
            return None
        return await self._update(
            {'_id': oid, 'comments._id': comment_oid},
            {'$pull': {'comments': {'_id': comment_oid}}},
        )


class InMemoryPostStore(PostStore):
    """
    Dict-backed store with the same semantics as MongoPostStore.
    Documents are copied in and out, like a round trip to the database.
    """

    def __init__(self):
        self.posts: Dict[ObjectId, Dict[str, Any]] = {}

    def _get(self, post_id):
        oid = parse_object_id(post_id)
        if oid is None:
            return None
        return self.posts.get(oid)

    async def create(self, doc):
        doc.setdefault('_id', ObjectId())
        self.posts[doc['_id']] = copy.deepcopy(doc)
        return doc

    async def find_by_id(self, post_id):
        post = self._get(post_id)
        return copy.deepcopy(post) if post else None

    async def find_all(self):
        posts = sorted(self.posts.values(), key=lambda p: p['date'], reverse=True)
        return copy.deepcopy(posts)

    async def save(self, doc):
        if doc.get('_id') not in self.posts:
            return None
        self.posts[doc['_id']] = copy.deepcopy(doc)
        return doc

    async def delete(self, post_id):
        post = self._get(post_id)
        if not post:
            return False
        del self.posts[post['_id']]
        return True

    async def add_like(self, post_id, user_id):
        post = self._get(post_id)
        if not post or any(like['user'] == user_id for like in post['likes']):
            return None
        post['likes'].insert(0, {'user': user_id})
        return copy.deepcopy(post)

    async def remove_like(self, post_id, user_id):
        post = self._get(post_id)
        if not post or not any(like['user'] == user_id for like in post['likes']):
            return None
        post['likes'] = [like for like in post['likes'] if like['user'] != user_id]
        return copy.deepcopy(post)

    async def add_comment(self, post_id, comment):
        post = self._get(post_id)
        if not post:
            return None
        post['comments'].insert(0, copy.deepcopy(comment))
        return copy.deepcopy(post)

    async def remove_comment(self, post_id, comment_id):
        post = self._get(post_id)
        comment_oid = parse_object_id(comment_id)
        if not post or comment_oid is None:
            return None
        if not any(c['_id'] == comment_oid for c in post['comments']):
            return None
        post['comments'] = [c for c in post['comments'] if c['_id'] != comment_oid]
        return copy.deepcopy(post)
