import os
import sys
from pathlib import Path
from types import SimpleNamespace

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORE_RETRY_BACKOFF", "0")

import httpx  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app import models  # noqa: E402,F401
from app.core.security import hash_token  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.models.repository import Collaborator, Repository  # noqa: E402
from app.models.user import OrgMembership, User, UserType  # noqa: E402
from app.shared_kernel.value_objects import AccessLevel, Caller, OwnerRef, OwnerType  # noqa: E402


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def accounts(session_factory):
    """
    Seed accounts:

    - alice, bob, carol (private) individuals; root is a site admin
    - acme (public org): alice admin, bob read
    - stealth (private org): no members besides alice (write)
    - repositories alice/widgets (public), alice/secret (private),
      acme/rocket (public, bob collaborator with write)
    """
    async with session_factory() as session:
        alice = User(name="alice", token_hash=hash_token("alice-token"))
        bob = User(name="bob", token_hash=hash_token("bob-token"))
        carol = User(name="carol", is_private=True, token_hash=hash_token("carol-token"))
        root = User(name="root", is_admin=True, token_hash=hash_token("root-token"))
        acme = User(name="acme", type=UserType.ORGANIZATION)
        stealth = User(name="stealth", type=UserType.ORGANIZATION, is_private=True)
        session.add_all([alice, bob, carol, root, acme, stealth])
        await session.flush()

        widgets = Repository(owner_id=alice.id, name="widgets")
        secret = Repository(owner_id=alice.id, name="secret", is_private=True)
        rocket = Repository(owner_id=acme.id, name="rocket")
        session.add_all([widgets, secret, rocket])
        await session.flush()

        session.add_all([
            OrgMembership(org_id=acme.id, user_id=alice.id, access_level=AccessLevel.ADMIN),
            OrgMembership(org_id=acme.id, user_id=bob.id, access_level=AccessLevel.READ),
            OrgMembership(org_id=stealth.id, user_id=alice.id, access_level=AccessLevel.WRITE),
            Collaborator(repo_id=rocket.id, user_id=bob.id, access_level=AccessLevel.WRITE),
        ])
        await session.commit()

        return SimpleNamespace(
            alice=Caller(user_id=alice.id, name="alice"),
            bob=Caller(user_id=bob.id, name="bob"),
            carol=Caller(user_id=carol.id, name="carol"),
            root=Caller(user_id=root.id, name="root", is_admin=True),
            alice_owner=OwnerRef(kind=OwnerType.INDIVIDUAL, id=alice.id, name="alice"),
            carol_owner=OwnerRef(kind=OwnerType.INDIVIDUAL, id=carol.id, name="carol"),
            acme_owner=OwnerRef(kind=OwnerType.ORGANIZATION, id=acme.id, name="acme"),
            stealth_owner=OwnerRef(kind=OwnerType.ORGANIZATION, id=stealth.id, name="stealth"),
            widgets_owner=OwnerRef(
                kind=OwnerType.REPOSITORY, id=widgets.id, name="alice/widgets", repo_owner_id=alice.id
            ),
            secret_owner=OwnerRef(
                kind=OwnerType.REPOSITORY, id=secret.id, name="alice/secret", repo_owner_id=alice.id
            ),
            rocket_owner=OwnerRef(
                kind=OwnerType.REPOSITORY, id=rocket.id, name="acme/rocket", repo_owner_id=acme.id
            ),
        )


@pytest_asyncio.fixture
async def client(session_factory, accounts):
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
