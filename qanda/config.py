# qanda/config.py
import logging
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from crud import meta

logger = logging.getLogger("qanda.config")

SETTINGS_HASH = "question-and-answer"
DEFAULT_CID_PREFIX = "default_cid_"


def _on(value: Optional[str]) -> bool:
    return value == "on"


class QandAConfig(BaseModel):
    force_questions: bool = False
    toggle_lock: bool = False
    default_cids: List[int] = Field(default_factory=list)

    @classmethod
    def from_hash(cls, values: Dict[str, Optional[str]]) -> "QandAConfig":
        default_cids = []
        for key, value in values.items():
            suffix = key[len(DEFAULT_CID_PREFIX):]
            if key.startswith(DEFAULT_CID_PREFIX) and suffix.isdigit() and _on(value):
                default_cids.append(int(suffix))
        return cls(
            force_questions=_on(values.get("force_questions")),
            toggle_lock=_on(values.get("toggle_lock")),
            default_cids=sorted(default_cids),
        )

    def to_hash(self, all_cids: List[int]) -> Dict[str, str]:
        """Every known category gets an explicit on/off so stale defaults are cleared."""
        values = {
            "force_questions": "on" if self.force_questions else "off",
            "toggle_lock": "on" if self.toggle_lock else "off",
        }
        for cid in all_cids:
            values[f"{DEFAULT_CID_PREFIX}{cid}"] = "on" if cid in self.default_cids else "off"
        return values

    def is_question_by_default(self, cid: Optional[int]) -> bool:
        return self.force_questions or (cid is not None and int(cid) in self.default_cids)


def load_config(db: Session) -> QandAConfig:
    return QandAConfig.from_hash(meta.get_settings_hash(db, SETTINGS_HASH))


class ConfigHolder:
    """Owns the current plugin config; handlers receive ``current`` explicitly."""

    def __init__(self, config: Optional[QandAConfig] = None):
        self._config = config or QandAConfig()

    @property
    def current(self) -> QandAConfig:
        return self._config

    def refresh(self, db: Session) -> QandAConfig:
        self._config = load_config(db)
        logger.info(
            "Loaded question-and-answer settings (force_questions=%s, toggle_lock=%s, default_cids=%s)",
            self._config.force_questions, self._config.toggle_lock, self._config.default_cids,
        )
        return self._config

    def save(self, db: Session, config: QandAConfig, all_cids: List[int]) -> QandAConfig:
        meta.set_settings_hash(db, SETTINGS_HASH, config.to_hash(all_cids))
        return self.refresh(db)
