# qanda/hooks.py
"""
Typed hook messages and the registry that dispatches them.

Filter-style handlers return the (possibly replaced) event; action-style
handlers return None and the event passes through unchanged. Handlers run in
priority order, then registration order, and their exceptions propagate to the
caller that fired the event.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from sqlalchemy.orm import Session
from qanda.config import QandAConfig

logger = logging.getLogger("qanda.hooks")


@dataclass
class PluginContext:
    db: Session
    config: QandAConfig
    hooks: "HookRegistry"


# ---------- lifecycle ----------

@dataclass
class TopicCreated:
    topic: Dict[str, Any]
    data: Dict[str, Any]
    uid: int = 0


@dataclass
class TopicSaved:
    topic: Dict[str, Any]


@dataclass
class TopicEdited:
    topic: Dict[str, Any]
    data: Dict[str, Any]
    uid: int = 0


@dataclass
class TopicPurged:
    topic: Optional[Dict[str, Any]]
    uid: int = 0


# ---------- rendering ----------

@dataclass
class RenderTopicList:
    topics: List[Dict[str, Any]]
    uid: int = 0


@dataclass
class RenderSingleTopic:
    template_data: Dict[str, Any]
    uid: int = 0
    post_header: str = ""


@dataclass
class ThreadTools:
    topic: Dict[str, Any]
    uid: int = 0
    tools: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class PostTools:
    pid: int
    uid: int = 0
    tools: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ComposerPush:
    pid: int
    uid: int = 0
    data: Dict[str, Any] = field(default_factory=dict)


# ---------- registration ----------

@dataclass
class RewardConditions:
    conditions: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class TopicEventTypes:
    types: Dict[str, Dict[str, str]] = field(default_factory=dict)


@dataclass
class Navigation:
    menu: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class AdminNavigation:
    plugins: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ClientConfig:
    config: Dict[str, Any] = field(default_factory=dict)


# ---------- action notifications ----------

@dataclass
class TopicSolvedToggled:
    uid: int
    tid: int
    pid: Optional[int]
    is_solved: bool


@dataclass
class TopicQuestionToggled:
    uid: int
    tid: int
    is_question: bool


E = TypeVar("E")
Handler = Callable[[Any, PluginContext], Optional[Any]]


class HookRegistry:
    def __init__(self):
        self._handlers: Dict[type, List[tuple]] = defaultdict(list)
        self._counter = 0

    def register(self, event_type: Type[E], handler: Handler, priority: int = 10):
        self._counter += 1
        self._handlers[event_type].append((priority, self._counter, handler))
        self._handlers[event_type].sort(key=lambda item: (item[0], item[1]))

    def handlers(self, event_type: type) -> List[Handler]:
        return [handler for _, _, handler in self._handlers.get(event_type, [])]

    def fire(self, event: E, ctx: PluginContext) -> E:
        handlers = self.handlers(type(event))
        logger.debug("Firing %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            result = handler(event, ctx)
            if result is not None:
                event = result
        return event
