import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from coursestore.config import get_settings
from coursestore.database import Base, SessionLocal, engine
from coursestore.dependencies import build_store
from coursestore.errors import StorageWriteError
from coursestore.models import StorageEntry  # noqa: F401 - register table
from coursestore.routers import admin, ads, auth, buy_requests, courses, downloads, profile, users
from coursestore.services.seed import seed_store

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    if settings.seed_on_startup:
        db = SessionLocal()
        try:
            seed_store(build_store(db), settings)
        except StorageWriteError as e:
            logger.warning("Seeding skipped: %s", e)
        finally:
            db.close()
    yield


app = FastAPI(title="Course Store API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageWriteError)
async def storage_write_error_handler(request: Request, exc: StorageWriteError):
    """Non-fatal: the change was not saved, earlier data is intact."""
    return JSONResponse(
        status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
        content={"detail": str(exc), "warning": True},
    )


app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(buy_requests.router)
app.include_router(ads.router)
app.include_router(downloads.router)
app.include_router(profile.router)
app.include_router(users.router)
app.include_router(admin.router)


@app.get("/")
def root():
    return {"message": "Course Store API", "docs": "/docs"}
