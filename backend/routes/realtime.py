# backend/routes/realtime.py
# Relays change feed events to browser dashboards over a websocket.
import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from services import orders as order_service
from services import settings_store
from services.realtime import ChangeEvent

router = APIRouter(prefix="/realtime", tags=["Realtime"])
logger = logging.getLogger(__name__)

CHANNELS = {order_service.TABLE, settings_store.TABLE}


@router.websocket("/{table}")
async def subscribe(websocket: WebSocket, table: str):
    if table not in CHANNELS:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    feed = websocket.app.state.change_feed
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    # Publishers run in worker threads
    def _enqueue(event: ChangeEvent) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, event)

    async def _pump():
        while True:
            event = await queue.get()
            await websocket.send_json({"type": "change", **event.to_dict()})

    async def _drain():
        # Clients only listen; reading is how a disconnect is noticed
        while True:
            await websocket.receive_text()

    unsubscribe = feed.subscribe(table, _enqueue)
    logger.info("Realtime subscriber joined %s", table)
    tasks = []
    try:
        await websocket.send_json({"type": "subscribed", "table": table})
        tasks = [asyncio.create_task(_pump()), asyncio.create_task(_drain())]
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                raise exc
    except WebSocketDisconnect:
        pass
    finally:
        for task in tasks:
            task.cancel()
        unsubscribe()
        logger.info("Realtime subscriber left %s", table)
