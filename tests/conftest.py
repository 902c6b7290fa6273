import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="qanda-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

from crud import sorted_sets
from database import Base, SessionLocal, engine
from models import Category, CategoryPrivilege, Post, Topic, User
from qanda import indexes, plugin
from qanda.config import QandAConfig
from qanda.hooks import HookRegistry, PluginContext
from routers.auth import create_access_token


class ForumFactory:
    """Seeds host records straight through the ORM."""

    def __init__(self, db):
        self.db = db
        self._clock = 1_000_000

    def tick(self) -> int:
        self._clock += 1000
        return self._clock

    def user(self, username: str, **kwargs) -> User:
        user = User(username=username, **kwargs)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def grant(self, cid: int, privilege: str, uid: int = None):
        self.db.add(CategoryPrivilege(cid=cid, privilege=privilege, uid=uid))
        self.db.commit()

    def category(self, name: str, public: bool = True, parent_cid: int = None) -> Category:
        category = Category(name=name, parent_cid=parent_cid)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        if public:
            self.grant(category.cid, "read")
            self.grant(category.cid, "topics:create")
        return category

    def topic(self, cid: int, uid: int = None, title: str = "A topic", content: str = "Body", tid: int = None) -> Topic:
        timestamp = self.tick()
        topic = Topic(tid=tid, cid=cid, uid=uid, title=title, timestamp=timestamp, lastposttime=timestamp)
        self.db.add(topic)
        self.db.flush()
        main = Post(tid=topic.tid, uid=uid, content=content, timestamp=timestamp)
        self.db.add(main)
        self.db.flush()
        topic.main_pid = main.pid
        self.db.commit()
        self.db.refresh(topic)
        sorted_sets.sorted_set_add(self.db, f"cid:{cid}:tids:lastposttime", timestamp, topic.tid)
        return topic

    def post(self, tid: int, uid: int = None, content: str = "A reply", votes: int = 0, deleted: int = 0) -> Post:
        post = Post(tid=tid, uid=uid, content=content, votes=votes, deleted=deleted, timestamp=self.tick())
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        return post


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def forum(db):
    return ForumFactory(db)


@pytest.fixture
def config():
    return QandAConfig()


@pytest.fixture
def hooks():
    return plugin.register(HookRegistry())


@pytest.fixture
def ctx(db, config, hooks):
    return PluginContext(db=db, config=config, hooks=hooks)


@pytest.fixture
def client():
    from main import app

    with TestClient(app) as c:
        yield c


def auth(uid: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(uid)})}"}


def token(uid: int) -> str:
    return create_access_token({"sub": str(uid)})


def index_of(db, tid: int):
    """Which question index holds ``tid``, if any."""
    for key in (indexes.SOLVED_SET, indexes.UNSOLVED_SET):
        if sorted_sets.is_sorted_set_member(db, key, tid):
            return key
    return None
