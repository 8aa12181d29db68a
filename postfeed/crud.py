from datetime import datetime
import logging

from bson import ObjectId

from .directory import UserDirectory
from .errors import NotFound, Unauthorized, DuplicateLike, NotLiked
from .store import PostStore

logger = logging.getLogger(__name__)


async def _author_snapshot(users: UserDirectory, user_id: str):
    user = await users.get(user_id)
    if not user:
        raise NotFound('User not found')
    return user['name'], user['avatar']

# posts
async def create_post(store: PostStore, users: UserDirectory, user_id: str, text: str):
    name, avatar = await _author_snapshot(users, user_id)
    post = {
        'text': text,
        'name': name,
        'avatar': avatar,
        'user': user_id,
        'likes': [],
        'comments': [],
        'date': datetime.utcnow(),
    }
    post = await store.create(post)
    logger.info(f"Post {post['_id']} created by user {user_id}")
    return post

async def list_posts(store: PostStore):
    return await store.find_all()

async def get_post(store: PostStore, post_id: str):
    post = await store.find_by_id(post_id)
    if not post:
        raise NotFound('Post not found')
    return post

async def delete_post(store: PostStore, user_id: str, post_id: str):
    post = await get_post(store, post_id)
    if post['user'] != user_id:
        raise Unauthorized()

    if not await store.delete(post['_id']):
        raise NotFound('Post not found')
    logger.info(f"Post {post['_id']} removed by user {user_id}")
    return {'msg': 'Post removed'}

# likes
async def like_post(store: PostStore, user_id: str, post_id: str):
    post = await get_post(store, post_id)
    if any(like['user'] == user_id for like in post['likes']):
        raise DuplicateLike()

    # a concurrent like by the same user makes the conditional push match nothing
    updated = await store.add_like(post['_id'], user_id)
    if updated is None:
        raise DuplicateLike()
    return updated['likes']

async def unlike_post(store: PostStore, user_id: str, post_id: str):
    post = await get_post(store, post_id)
    if not any(like['user'] == user_id for like in post['likes']):
        raise NotLiked()

    updated = await store.remove_like(post['_id'], user_id)
    if updated is None:
        raise NotLiked()
    return updated['likes']

# comments
async def add_comment(store: PostStore, users: UserDirectory, user_id: str, post_id: str, text: str):
    post = await get_post(store, post_id)
    name, avatar = await _author_snapshot(users, user_id)
    comment = {
        '_id': ObjectId(),
        'text': text,
        'name': name,
        'avatar': avatar,
        'user': user_id,
        'date': datetime.utcnow(),
    }
    updated = await store.add_comment(post['_id'], comment)
    if updated is None:
        raise NotFound('Post not found')
    return updated['comments']

async def delete_comment(store: PostStore, user_id: str, post_id: str, comment_id: str):
    post = await get_post(store, post_id)
    comment = next((c for c in post['comments'] if str(c['_id']) == comment_id), None)
    if not comment:
        raise NotFound('Comment does not exist')
    if comment['user'] != user_id:
        raise Unauthorized()

    updated = await store.remove_comment(post['_id'], comment['_id'])
    if updated is None:
        raise NotFound('Comment does not exist')
    logger.info(f"Comment {comment_id} removed from post {post_id} by user {user_id}")
    return updated['comments']
