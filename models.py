from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey, Text, Boolean, Float, UniqueConstraint
from sqlalchemy.orm import relationship
import time
from database import Base


def now_ms() -> int:
    return int(time.time() * 1000)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_global_mod = Column(Boolean, default=False, nullable=False)
    topics_per_page = Column(Integer, default=20, nullable=False)

    fields = relationship("UserField", back_populates="user", cascade="all, delete-orphan")
    topics = relationship("Topic", back_populates="user")
    posts = relationship("Post", back_populates="user")


class UserField(Base):
    """Numeric per-user counters (e.g. ``qanda/question.accepted``)."""
    __tablename__ = "user_fields"

    uid = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    field = Column(String, primary_key=True)
    value = Column(Integer, default=0, nullable=False)

    user = relationship("User", back_populates="fields")


class Category(Base):
    __tablename__ = "categories"

    cid = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    parent_cid = Column(Integer, ForeignKey("categories.cid"), nullable=True)
    order = Column(Integer, default=0, nullable=False)

    topics = relationship("Topic", back_populates="category")
    privileges = relationship("CategoryPrivilege", back_populates="category", cascade="all, delete-orphan")


class CategoryPrivilege(Base):
    # uid NULL grants the privilege to everyone, guests included
    __tablename__ = "category_privileges"

    id = Column(Integer, primary_key=True, index=True)
    cid = Column(Integer, ForeignKey("categories.cid", ondelete="CASCADE"), nullable=False, index=True)
    privilege = Column(String, nullable=False)
    uid = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)

    category = relationship("Category", back_populates="privileges")

    __table_args__ = (UniqueConstraint("cid", "privilege", "uid", name="uq_category_privilege"),)


class Topic(Base):
    __tablename__ = "topics"

    tid = Column(Integer, primary_key=True, index=True)
    cid = Column(Integer, ForeignKey("categories.cid"), nullable=False, index=True)
    uid = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String, nullable=False)
    main_pid = Column(Integer, nullable=True)
    locked = Column(Integer, default=0, nullable=False)
    deleted = Column(Integer, default=0, nullable=False)
    timestamp = Column(BigInteger, default=now_ms, nullable=False)
    lastposttime = Column(BigInteger, default=now_ms, nullable=False)

    # question-and-answer fields; NULL means the field is absent
    is_question = Column(Integer, nullable=True)
    is_solved = Column(Integer, nullable=True)
    solved_pid = Column(Integer, nullable=True)

    category = relationship("Category", back_populates="topics")
    user = relationship("User", back_populates="topics")
    posts = relationship("Post", back_populates="topic", cascade="all, delete-orphan")
    events = relationship("TopicEvent", back_populates="topic", cascade="all, delete-orphan")


class Post(Base):
    __tablename__ = "posts"

    pid = Column(Integer, primary_key=True, index=True)
    tid = Column(Integer, ForeignKey("topics.tid", ondelete="CASCADE"), nullable=False, index=True)
    uid = Column(Integer, ForeignKey("users.id"), nullable=True)
    content = Column(Text, nullable=False, default="")
    votes = Column(Integer, default=0, nullable=False)
    deleted = Column(Integer, default=0, nullable=False)
    timestamp = Column(BigInteger, default=now_ms, nullable=False)

    topic = relationship("Topic", back_populates="posts")
    user = relationship("User", back_populates="posts")


class SortedSetEntry(Base):
    __tablename__ = "sorted_set_entries"

    key = Column(String, primary_key=True)
    value = Column(Integer, primary_key=True)
    score = Column(Float, nullable=False, index=True)


class TopicEvent(Base):
    __tablename__ = "topic_events"

    id = Column(Integer, primary_key=True, index=True)
    tid = Column(Integer, ForeignKey("topics.tid", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)
    uid = Column(Integer, nullable=True)
    timestamp = Column(BigInteger, default=now_ms, nullable=False)

    topic = relationship("Topic", back_populates="events")


class SettingsHash(Base):
    __tablename__ = "settings_hashes"

    name = Column(String, primary_key=True)
    field = Column(String, primary_key=True)
    value = Column(String, nullable=True)


class Reward(Base):
    __tablename__ = "rewards"

    id = Column(Integer, primary_key=True, index=True)
    condition = Column(String, nullable=False, index=True)
    threshold = Column(Integer, nullable=False, default=1)
    claimable = Column(Integer, nullable=False, default=1)
    active = Column(Boolean, nullable=False, default=True)
    reward_name = Column(String, nullable=False)

    claims = relationship("RewardClaim", back_populates="reward", cascade="all, delete-orphan")


class RewardClaim(Base):
    __tablename__ = "reward_claims"

    id = Column(Integer, primary_key=True, index=True)
    reward_id = Column(Integer, ForeignKey("rewards.id", ondelete="CASCADE"), nullable=False, index=True)
    uid = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = Column(BigInteger, default=now_ms, nullable=False)

    reward = relationship("Reward", back_populates="claims")
