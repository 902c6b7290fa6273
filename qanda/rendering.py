# qanda/rendering.py
from typing import Any, Dict
from fastapi.templating import Jinja2Templates
from settings import settings

templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)


def render_partial(name: str, context: Dict[str, Any]) -> str:
    return templates.get_template(name).render(**context)
