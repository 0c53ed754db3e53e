# backend/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

load_dotenv()

from config import settings
from core.exceptions import BaseApplicationError
from database import SessionLocal, init_db
from services.realtime import ChangeFeed
from services.settings_store import StoreSettingsProvider
from utils.storage import upload_dir

# Routers
from routes.auth import router as auth_router
from routes.cart import router as cart_router
from routes.categories import router as categories_router
from routes.logs import router as logs_router
from routes.menu import router as menu_router
from routes.orders import router as orders_router
from routes.realtime import router as realtime_router
from routes.reports import router as reports_router
from routes.settings import router as settings_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    feed = ChangeFeed()
    provider = StoreSettingsProvider(feed)
    db = SessionLocal()
    try:
        provider.refresh(db)
    finally:
        db.close()
    app.state.change_feed = feed
    app.state.settings_provider = provider
    logger.info("Restaurant API started")
    yield
    provider.close()
    feed.close()


app = FastAPI(title="Restaurant Ordering API", version="1.0.0", lifespan=lifespan)

origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BaseApplicationError)
async def application_error_handler(request: Request, exc: BaseApplicationError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.error_code, "details": exc.details},
    )


# Router registration
app.include_router(auth_router)
app.include_router(menu_router)
app.include_router(categories_router)
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(settings_router)
app.include_router(reports_router)
app.include_router(logs_router)
app.include_router(realtime_router)

# Mounted after the routers so POST /uploads/images reaches the upload route
app.mount("/uploads", StaticFiles(directory=str(upload_dir())), name="uploads")


@app.get("/")
def read_root():
    return {"message": "Restaurant Ordering API is running"}
