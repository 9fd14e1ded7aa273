import os
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AppError, DEFAULT_ERROR
from app.db import Base, engine

from app.routers import auth as auth_router
from app.routers import admin as admin_router
from app.routers import points as points_router
from app.routers import school_settings as school_settings_router
from app.routers import diagnostics as diagnostics_router

log = logging.getLogger("app")

app = FastAPI(title="TeacherMate API")

# ==== CORS ====
origins = os.getenv("CORS_ORIGINS", "")
origins_list = [o.strip() for o in origins.split(",")] if origins else ["http://localhost:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if os.getenv("DEV_AUTO_CREATE", "0") == "1":
    from app.db import base as _models  # noqa: F401  (모델 등록)
    Base.metadata.create_all(bind=engine)

# ==== 오류 -> {"error": ...} ====
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.payload())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = f"{loc}: {first.get('msg')}" if loc else "요청 형식이 올바르지 않습니다."
    return JSONResponse(status_code=400, content={"error": msg})

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": DEFAULT_ERROR})

# ==== Routers ====
app.include_router(auth_router.router)
app.include_router(admin_router.router)
app.include_router(points_router.router)
app.include_router(school_settings_router.router)
app.include_router(diagnostics_router.router)

@app.get("/health")
def health():
    return {"status": "ok"}
