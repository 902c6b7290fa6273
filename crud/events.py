# crud/events.py
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from models import TopicEvent


def log_topic_event(db: Session, tid: int, event_type: str, uid: Optional[int]) -> TopicEvent:
    event = TopicEvent(tid=tid, type=event_type, uid=uid)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def get_topic_events(db: Session, tid: int, types: Optional[Dict[str, Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
    """Events oldest first, decorated with the registered icon/text for their type."""
    types = types or {}
    events = (
        db.query(TopicEvent)
        .filter(TopicEvent.tid == tid)
        .order_by(TopicEvent.timestamp.asc(), TopicEvent.id.asc())
        .all()
    )
    out = []
    for event in events:
        data = {"id": event.id, "type": event.type, "uid": event.uid, "timestamp": event.timestamp}
        data.update(types.get(event.type, {}))
        out.append(data)
    return out
