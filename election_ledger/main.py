# main.py
import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from election_ledger import config
from election_ledger.events import EventLog, LoggingSink, MongoEventSink
from election_ledger.ledger import ElectionLedger
from election_ledger.routes.auth_routes import auth_router
from election_ledger.routes.election_routes import router as election_router
from election_ledger.routes.vote_routes import vote_router
from election_ledger.storage import build_store

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


# ==============================================================================
# LEDGER BOOTSTRAP
# ==============================================================================
def load_ledger(store, events, lock_candidates_while_open=False):
    """
    Election held by the store, or a fresh one when ELECTION_NAME and
    ELECTION_ADMIN are configured. None means it has to be created over HTTP.
    """
    options = {"store": store, "events": events, "lock_candidates_while_open": lock_candidates_while_open}
    snapshot = store.load()
    if snapshot is not None:
        return ElectionLedger.restore(snapshot, **options)
    if config.ELECTION_NAME and config.ELECTION_ADMIN:
        return ElectionLedger.create(config.ELECTION_NAME, config.ELECTION_ADMIN, **options)
    logger.info("No election stored yet; waiting for POST /election/create")
    return None


# ==============================================================================
# FASTAPI APPLICATION
# ==============================================================================
def create_app(store=None, events=None, lock_candidates_while_open=None) -> FastAPI:
    if store is None:
        store = build_store()
    if events is None:
        events = EventLog([LoggingSink()])
        logs_collection = getattr(store, "logs", None)
        if logs_collection is not None:
            events.add_sink(MongoEventSink(logs_collection))
    if lock_candidates_while_open is None:
        lock_candidates_while_open = config.LOCK_CANDIDATES_WHILE_OPEN

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        store.close()

    app = FastAPI(title="Election Ledger API", lifespan=lifespan)
    app.state.store = store
    app.state.events = events
    app.state.lock_candidates_while_open = lock_candidates_while_open
    app.state.ledger_lock = threading.Lock()
    app.state.ledger = load_ledger(store, events, lock_candidates_while_open)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(election_router)
    app.include_router(vote_router)

    @app.get("/health", tags=["Root"])
    def health_check():
        return {
            "status": "healthy",
            "storage": type(store).__name__,
            "election": app.state.ledger is not None,
        }

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Welcome to the Election Ledger API"}

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_app()
