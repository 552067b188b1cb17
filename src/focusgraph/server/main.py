from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from focusgraph.bus import NotificationBus
from focusgraph.config import ConfigStore
from focusgraph.git_facts.git import status_entries
from focusgraph.graph import GraphBuilder
from focusgraph.idea import apply_idea
from focusgraph.model import FocusConfig, PersistenceError, StatusQuery
from focusgraph.reach import split_projects
from focusgraph.watcher import ChangeWatcher

from .settings import Settings, load_settings

logger = logging.getLogger(__name__)

# -------------------- Schemas --------------------

class ConfigBody(BaseModel):
    focusedProjects: list[str] = Field(default_factory=list)
    downstreamHops: int = Field(default=1, ge=0)

class IncludedResponse(BaseModel):
    included: list[str]
    excluded: list[str]

def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc)})

# -------------------- App --------------------

def create_app(
    settings: Optional[Settings] = None,
    status_query: Optional[StatusQuery] = None,
) -> FastAPI:
    settings = settings or load_settings()
    registry = settings.registry()
    store = ConfigStore(settings.config_path)
    builder = GraphBuilder(settings.root, registry)
    bus = NotificationBus()
    watcher = ChangeWatcher(
        registry,
        store,
        builder,
        bus,
        status_query or partial(status_entries, settings.root),
        interval=settings.poll_interval,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # warm-up build, mostly so a broken root shows up in the log at boot
        graph = builder.build()
        logger.info("Focus server ready: %d projects under %s", len(graph.projects), settings.root)

        task: Optional[asyncio.Task] = None
        if settings.watch:
            task = asyncio.create_task(watcher.run())
        try:
            yield
        finally:
            await watcher.stop()
            if task is not None:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
            bus.close()

    app = FastAPI(title="Focus Graph", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.store = store
    app.state.builder = builder
    app.state.bus = bus
    app.state.watcher = watcher

    # -------------------- Endpoints --------------------

    @app.get("/api/config")
    def get_config():
        return store.load().to_payload()

    @app.post("/api/config")
    def post_config(body: ConfigBody):
        config = FocusConfig(tuple(body.focusedProjects), body.downstreamHops)
        try:
            store.save(config)
        except PersistenceError as e:
            logger.error("Saving focus config failed: %s", e)
            return _error(e)
        return {"success": True}

    @app.get("/api/graph")
    def get_graph():
        graph = builder.build()
        logger.debug("Sending graph: %d nodes", len(graph.projects))
        return graph.to_payload()

    @app.get("/api/included", response_model=IncludedResponse)
    def get_included():
        config = store.load()
        included, excluded = split_projects(
            builder.build(), config.focused_projects, config.downstream_hops
        )
        return IncludedResponse(included=included, excluded=excluded)

    @app.post("/api/applyIdea")
    def post_apply_idea():
        try:
            apply_idea(store, builder, settings.idea_path)
        except PersistenceError as e:
            logger.error("Error applying IDEA exclusions: %s", e)
            return _error(e)
        return {"success": True}

    @app.websocket("/ws/changes")
    async def changes(websocket: WebSocket):
        await websocket.accept()
        sub = bus.subscribe()
        reader = asyncio.create_task(_wait_for_disconnect(websocket))
        try:
            while True:
                getter = asyncio.create_task(sub.get())
                done, _ = await asyncio.wait({getter, reader}, return_when=asyncio.FIRST_COMPLETED)
                if getter not in done:
                    getter.cancel()
                    break
                notification = getter.result()
                if notification is None:
                    # bus closed (shutdown)
                    await websocket.close()
                    break
                await websocket.send_json(notification.to_payload())
        except WebSocketDisconnect:
            pass
        finally:
            reader.cancel()
            bus.unsubscribe(sub)

    return app


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    # clients never send anything meaningful; reading is how disconnects surface
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
