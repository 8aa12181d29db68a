import os
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Tokens in tests are signed with a fixed secret
os.environ.setdefault('JWT_SECRET', 'test-secret')

from postfeed.main import app  # noqa: E402
from postfeed.auth import create_access_token  # noqa: E402
from postfeed.dependencies import get_post_store, get_user_directory  # noqa: E402
from postfeed.directory import InMemoryUserDirectory  # noqa: E402
from postfeed.store import InMemoryPostStore  # noqa: E402

ALICE = 'user-alice'
BOB = 'user-bob'


def auth_headers(user_id: str) -> dict:
    return {'Authorization': f"Bearer {create_access_token({'id': user_id})}"}


@pytest.fixture
def store():
    return InMemoryPostStore()


@pytest.fixture
def users():
    directory = InMemoryUserDirectory()
    directory.add(ALICE, 'Alice', 'https://gravatar.example/alice.png')
    directory.add(BOB, 'Bob', 'https://gravatar.example/bob.png')
    return directory


@pytest_asyncio.fixture
async def client(store, users):
    app.dependency_overrides[get_post_store] = lambda: store
    app.dependency_overrides[get_user_directory] = lambda: users
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac
    app.dependency_overrides.clear()
