from fastapi import APIRouter, Depends
from typing import List
from ..schemas.posts import PostIn, PostOut, CommentIn, CommentOut, LikeOut, MessageOut
from ..crud import (
    create_post,
    list_posts,
    get_post,
    delete_post,
    like_post,
    unlike_post,
    add_comment,
    delete_comment
)
from ..auth import get_current_user
from ..dependencies import get_post_store, get_user_directory
from ..directory import UserDirectory
from ..store import PostStore

router = APIRouter()


@router.post('', response_model=PostOut)
async def create(
    payload: PostIn,
    current_user: dict = Depends(get_current_user),
    store: PostStore = Depends(get_post_store),
    users: UserDirectory = Depends(get_user_directory)
):
    return await create_post(store, users, current_user['id'], payload.text)


@router.get('', response_model=List[PostOut])
async def all_posts(
    current_user: dict = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    return await list_posts(store)


@router.get('/{post_id}', response_model=PostOut)
async def one_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    return await get_post(store, post_id)


@router.delete('/{post_id}', response_model=MessageOut)
async def remove(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    return await delete_post(store, current_user['id'], post_id)


@router.put('/like/{post_id}', response_model=List[LikeOut])
async def like(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    return await like_post(store, current_user['id'], post_id)


@router.put('/unlike/{post_id}', response_model=List[LikeOut])
async def unlike(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    return await unlike_post(store, current_user['id'], post_id)


@router.post('/comment/{post_id}', response_model=List[CommentOut])
async def comment(
    post_id: str,
    payload: CommentIn,
    current_user: dict = Depends(get_current_user),
    store: PostStore = Depends(get_post_store),
    users: UserDirectory = Depends(get_user_directory)
):
    return await add_comment(store, users, current_user['id'], post_id, payload.text)


@router.delete('/comment/{post_id}/{comment_id}', response_model=List[CommentOut])
async def uncomment(
    post_id: str,
    comment_id: str,
    current_user: dict = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    return await delete_comment(store, current_user['id'], post_id, comment_id)
