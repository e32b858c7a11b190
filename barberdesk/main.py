import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from barberdesk.core.errors import DomainError
from barberdesk.core.log import configure_logging
from barberdesk.database import create_db_and_tables
from barberdesk.routers import (
    appointments,
    auth,
    barbers,
    clients,
    dashboard,
    notifications,
    ratings,
    schedules,
    services,
    users,
)


configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="barberdesk")
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(barbers.router)
app.include_router(ratings.router)
app.include_router(clients.router)
app.include_router(services.router)
app.include_router(appointments.router)
app.include_router(schedules.router)
app.include_router(notifications.router)
app.include_router(dashboard.router)


@app.exception_handler(DomainError)
def domain_error_handler(request: Request, exc: DomainError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.code},
    )


@app.on_event("startup")
def on_startup():
    create_db_and_tables()


@app.get("/")
def root():
    return {"message": "API barberdesk funcionando"}
