from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument

from postfeed.directory import MongoUserDirectory
from postfeed.store import InMemoryPostStore, MongoPostStore, parse_object_id


def new_post(user='u1', text='hello'):
    return {
        'text': text, 'name': 'U', 'avatar': None, 'user': user,
        'likes': [], 'comments': [], 'date': datetime.utcnow(),
    }


def test_parse_object_id():
    oid = ObjectId()
    assert parse_object_id(oid) is oid
    assert parse_object_id(str(oid)) == oid
    assert parse_object_id('nope') is None
    assert parse_object_id(None) is None
    assert parse_object_id(12) is None


class TestInMemoryPostStore:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_copies(self):
        store = InMemoryPostStore()
        post = await store.create(new_post())
        post['text'] = 'changed after create'

        stored = await store.find_by_id(str(post['_id']))
        assert stored['text'] == 'hello'

    @pytest.mark.asyncio
    async def test_save(self):
        store = InMemoryPostStore()
        post = await store.create(new_post())
        post['text'] = 'edited'
        assert await store.save(post) is post
        assert (await store.find_by_id(post['_id']))['text'] == 'edited'

        assert await store.save(new_post()) is None

    @pytest.mark.asyncio
    async def test_malformed_ids(self):
        store = InMemoryPostStore()
        assert await store.find_by_id('zzz') is None
        assert await store.delete('zzz') is False
        assert await store.add_like('zzz', 'u1') is None
        assert await store.remove_comment('zzz', 'yyy') is None

    @pytest.mark.asyncio
    async def test_add_like_if_absent(self):
        store = InMemoryPostStore()
        post = await store.create(new_post())
        assert (await store.add_like(post['_id'], 'u2'))['likes'] == [{'user': 'u2'}]
        assert await store.add_like(post['_id'], 'u2') is None
        assert len((await store.find_by_id(post['_id']))['likes']) == 1

    @pytest.mark.asyncio
    async def test_remove_like_if_present(self):
        store = InMemoryPostStore()
        post = await store.create(new_post())
        assert await store.remove_like(post['_id'], 'u2') is None
        await store.add_like(post['_id'], 'u2')
        await store.add_like(post['_id'], 'u3')
        assert (await store.remove_like(post['_id'], 'u2'))['likes'] == [{'user': 'u3'}]

    @pytest.mark.asyncio
    async def test_remove_comment_by_id(self):
        store = InMemoryPostStore()
        post = await store.create(new_post())
        first = {'_id': ObjectId(), 'text': 'a', 'user': 'u2', 'date': datetime.utcnow()}
        second = {'_id': ObjectId(), 'text': 'b', 'user': 'u2', 'date': datetime.utcnow()}
        await store.add_comment(post['_id'], first)
        await store.add_comment(post['_id'], second)

        updated = await store.remove_comment(post['_id'], str(first['_id']))
        assert [c['text'] for c in updated['comments']] == ['b']
        assert await store.remove_comment(post['_id'], first['_id']) is None


class TestMongoPostStore:
    """Checks the queries sent to the collection"""

    @pytest.mark.asyncio
    async def test_add_like_is_conditional_push(self):
        collection = MagicMock()
        collection.find_one_and_update = AsyncMock(return_value={'likes': []})
        store = MongoPostStore(collection)
        oid = ObjectId()

        await store.add_like(str(oid), 'u1')

        collection.find_one_and_update.assert_awaited_once_with(
            {'_id': oid, 'likes.user': {'$ne': 'u1'}},
            {'$push': {'likes': {'$each': [{'user': 'u1'}], '$position': 0}}},
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_remove_like_is_conditional_pull(self):
        collection = MagicMock()
        collection.find_one_and_update = AsyncMock(return_value={'likes': []})
        store = MongoPostStore(collection)
        oid = ObjectId()

        assert await store.remove_like(str(oid), 'u1') == {'likes': []}

        collection.find_one_and_update.assert_awaited_once_with(
            {'_id': oid, 'likes.user': 'u1'},
            {'$pull': {'likes': {'user': 'u1'}}},
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_add_comment_prepends(self):
        collection = MagicMock()
        collection.find_one_and_update = AsyncMock(return_value=None)
        store = MongoPostStore(collection)
        oid = ObjectId()
        comment = {'_id': ObjectId(), 'text': 'hi', 'user': 'u1', 'date': datetime.utcnow()}

        assert await store.add_comment(oid, comment) is None

        collection.find_one_and_update.assert_awaited_once_with(
            {'_id': oid},
            {'$push': {'comments': {'$each': [comment], '$position': 0}}},
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_list_updates_skip_query_for_malformed_id(self):
        collection = MagicMock()
        collection.find_one_and_update = AsyncMock()
        store = MongoPostStore(collection)

        assert await store.remove_like('nope', 'u1') is None
        assert await store.add_comment('nope', {'text': 'hi'}) is None
        collection.find_one_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remove_comment_pulls_by_comment_id(self):
        collection = MagicMock()
        collection.find_one_and_update = AsyncMock(return_value=None)
        store = MongoPostStore(collection)
        oid, cid = ObjectId(), ObjectId()

        assert await store.remove_comment(oid, str(cid)) is None

        collection.find_one_and_update.assert_awaited_once_with(
            {'_id': oid, 'comments._id': cid},
            {'$pull': {'comments': {'_id': cid}}},
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_malformed_id_skips_query(self):
        collection = MagicMock()
        collection.find_one = AsyncMock()
        store = MongoPostStore(collection)

        assert await store.find_by_id('not-an-id') is None
        collection.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_find_all_sorted_by_date(self):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.to_list = AsyncMock(return_value=[])
        collection = MagicMock()
        collection.find.return_value = cursor

        assert await MongoPostStore(collection).find_all() == []
        cursor.sort.assert_called_once_with('date', -1)


@pytest.mark.asyncio
async def test_mongo_user_directory():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value={'_id': 'legacy-7', 'name': 'Zed', 'avatar': 'z.png'})
    users = MongoUserDirectory(collection)

    assert await users.get('legacy-7') == {'name': 'Zed', 'avatar': 'z.png'}
    collection.find_one.assert_awaited_once_with({'_id': 'legacy-7'}, {'name': 1, 'avatar': 1})
