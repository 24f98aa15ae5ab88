import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.database import engine, Base
from app.core.errors import AppError
from app.routers import health, auth, users, tasks

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Task Manager API",
    version="1.0.0"
)


# Les erreurs sont renvoyées dans le corps avec un statut 200: {"success": false, "message": ...}

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=200, content={"success": False, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    error = errors[0] if errors else {}
    loc = tuple(error.get("loc", ()))
    # JSON illisible ou corps absent: pas de nom de champ à afficher
    if error.get("type") == "json_invalid" or len(loc) < 2 or not isinstance(loc[-1], str):
        message = "Invalid request body"
    else:
        message = f"Invalid {loc[-1]}"
    return JSONResponse(status_code=200, content={"success": False, "message": message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=200, content={"success": False, "message": "Internal server error"})


# Routes
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(tasks.router)
