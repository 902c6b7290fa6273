import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from settings import settings

# -------------------- Logging -------------------- #
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("qanda")

# -------------------- Local imports -------------------- #
from database import Base, SessionLocal, engine
import models  # registers tables on Base.metadata
from qanda import plugin
from qanda.config import ConfigHolder
from qanda.hooks import HookRegistry
from routers import admin, host, questions, sockets


# -------------------- Plugin init -------------------- #
@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(settings, "ENV", "dev") != "prod":
        # prod schema is managed by alembic
        Base.metadata.create_all(bind=engine)
    app.state.hooks = plugin.register(HookRegistry())
    app.state.qanda_config = ConfigHolder()
    with SessionLocal() as db:
        app.state.qanda_config.refresh(db)
    logger.info("[Q&A] Plugin initialised")
    yield


# -------------------- FastAPI app -------------------- #
app = FastAPI(
    title="Question & Answer",
    debug=getattr(settings, "DEBUG", True),
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# -------------------- Middleware -------------------- #
_allowed = [settings.FRONTEND_URL] if settings.FRONTEND_URL else []

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------- Health -------------------- #
@app.get("/health")
def health():
    return {
        "env": getattr(settings, "ENV", "dev"),
        "debug": getattr(settings, "DEBUG", True),
        "question_and_answer": app.state.qanda_config.current.model_dump(),
    }

# -------------------- Routers -------------------- #
app.include_router(questions.router)
app.include_router(admin.router)
app.include_router(sockets.router)
app.include_router(host.router)
