# routers/deps.py
from fastapi import Depends
from fastapi.requests import HTTPConnection
from sqlalchemy.orm import Session

from database import get_db
from qanda.config import ConfigHolder, QandAConfig
from qanda.hooks import HookRegistry, PluginContext


def get_config_holder(conn: HTTPConnection) -> ConfigHolder:
    return conn.app.state.qanda_config


def get_config(holder: ConfigHolder = Depends(get_config_holder)) -> QandAConfig:
    return holder.current


def get_hooks(conn: HTTPConnection) -> HookRegistry:
    return conn.app.state.hooks


def get_plugin_context(
    db: Session = Depends(get_db),
    config: QandAConfig = Depends(get_config),
    hooks: HookRegistry = Depends(get_hooks),
) -> PluginContext:
    return PluginContext(db=db, config=config, hooks=hooks)
