from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from auth import router as auth_router
from core import db, log, settings
from core.error_handlers import register_error_handlers
from pet_status import router as pet_status_router
from pets import router as pets_router
from uploads import router as uploads_router
from uploads import service as uploads_service


@asynccontextmanager
async def lifespan(_: FastAPI):
    log.setup_logging(settings.log_level(), settings.log_format())
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Pet adoption API", lifespan=lifespan)

# Allow the frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(auth_router.router, tags=["accounts"])
app.include_router(pets_router.router, tags=["pets"])
app.include_router(pet_status_router.router, tags=["pet-status"])
app.include_router(uploads_router.router, tags=["uploads"])

app.mount(
    uploads_service.MEDIA_ROUTE,
    StaticFiles(directory=uploads_service.upload_dir(), check_dir=False),
    name="media",
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "pet adoption api"}
