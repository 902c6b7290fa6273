# crud/meta.py
from typing import Dict, Optional
from sqlalchemy.orm import Session
from models import SettingsHash


def get_settings_hash(db: Session, name: str) -> Dict[str, Optional[str]]:
    rows = db.query(SettingsHash).filter(SettingsHash.name == name).all()
    return {row.field: row.value for row in rows}


def set_settings_hash(db: Session, name: str, values: Dict[str, Optional[str]]):
    for field, value in values.items():
        row = db.get(SettingsHash, (name, field))
        if row:
            row.value = value
        else:
            db.add(SettingsHash(name=name, field=field, value=value))
    db.commit()
