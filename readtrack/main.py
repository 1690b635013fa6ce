import os
import time
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from dotenv import load_dotenv

from readtrack.core.exceptions import AppError
from readtrack.core.timeutils import utcnow
from readtrack.db import Base, engine
import readtrack.models  # noqa: F401  registra todos los modelos en Base.metadata

from readtrack.routers import auth as auth_router
from readtrack.routers import users as users_router
from readtrack.routers import books as books_router
from readtrack.routers import reading_progress as progress_router
from readtrack.routers import summaries as summaries_router
from readtrack.routers import comments as comments_router
from readtrack.routers import leaderboard as leaderboard_router
from readtrack.routers import dashboard as dashboard_router

load_dotenv()

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger("readtrack")

SERVICE_NAME = "ReadTrack API"

if os.getenv("DEV_AUTO_CREATE", "1") == "1":
    Base.metadata.create_all(bind=engine)

app = FastAPI(title=SERVICE_NAME)

# ==== CORS ====
origins = os.getenv("CORS_ORIGINS", "")
origins_list = [o.strip() for o in origins.split(",") if o.strip()] if origins else ["http://localhost:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    log.info("%s %s - %s - %.3fs", request.method, request.url.path, response.status_code, time.time() - start)
    return response

# ==== Errores: siempre {"error": mensaje} ====
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

# ==== Routers ====
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(books_router.router)
app.include_router(progress_router.router)
app.include_router(summaries_router.router)
app.include_router(comments_router.router)
app.include_router(leaderboard_router.router)
app.include_router(dashboard_router.router)

@app.get("/health")
def health():
    return {"status": "ok", "timestamp": utcnow().isoformat(), "service": SERVICE_NAME}
