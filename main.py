import asyncio
import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

import database
import schemas
from config import Settings, settings as default_settings
from database import Database
from logging_config import setup_logging

logger = logging.getLogger(__name__)

BANNER = "🚀 API is running! Use /users to test."
NO_DATA_MESSAGE = "No data found. Please add some data using POST /api/data"

router = APIRouter()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def error_response(e: Exception, **extra) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(e), **extra})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Unreadable bodies are reported like any other failure
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return error_response(Exception(message or "Invalid request body"))


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    """Build the record service.

    ``db`` is used as-is when given; otherwise a ``Database`` is built from
    ``settings`` at startup and closed at shutdown.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_database = app.state.database is None
        if owns_database:
            app.state.database = Database.from_settings(settings)
        # Connectivity is only reported; requests are served while the ping runs
        app.state.ping_task = asyncio.create_task(run_in_threadpool(app.state.database.ping))
        try:
            yield
        finally:
            if owns_database:
                app.state.database.close()
                app.state.database = None

    app = FastAPI(title="Rail Records API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(router)
    return app


@router.get("/", response_class=PlainTextResponse)
def read_root():
    return BANNER


@router.get("/health")
def health(db: Database = Depends(get_database), settings: Settings = Depends(get_settings)):
    """Report whether the backend can reach its database"""
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if settings.mongo_uri else "❌ Not Set",
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": [],
    }

    if db is None or db.db is None:
        return response

    response["database"] = "✅ Available"
    response["database_name"] = db.name
    try:
        collections = db.list_collection_names()
        response["collections"] = collections[:10]  # Show first 10 collections
        response["database"] = "✅ Connected & Working"
        response["connection_status"] = "Connected"
    except Exception as e:
        response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"

    return response


@router.get("/users")
def list_users(db: Database = Depends(get_database)):
    try:
        users = db.get_documents(database.USERS)
        return [database.serialize_document(user) for user in users]
    except Exception as e:
        logger.exception("Error fetching users")
        return error_response(e)


@router.post("/users")
def create_user(user: Optional[schemas.User] = None, db: Database = Depends(get_database)):
    data = user.to_document() if user is not None else {}
    try:
        created = db.create_document(database.USERS, data)
        return database.serialize_document(created)
    except Exception as e:
        logger.exception("Error creating user")
        return error_response(e)


@router.delete("/users")
def delete_users(db: Database = Depends(get_database)):
    try:
        deleted = db.delete_documents(database.USERS)
    except Exception as e:
        logger.exception("Error deleting users")
        return error_response(e)
    logger.info("Deleted %d users", deleted)
    return {"message": "All users deleted successfully"}


@router.post("/api/data")
def insert_data(bundle: Optional[schemas.DataBundle] = None, db: Database = Depends(get_database)):
    """Bulk insert section controllers, stations and trains.

    Each list goes into its own collection in that order, with no
    transaction: a failure leaves the lists inserted before it in place.
    """
    bundle = bundle or schemas.DataBundle()
    batches = [
        (database.SECTION_CONTROLLERS, bundle.section_controllers),
        (database.STATIONS, bundle.stations),
        (database.TRAINS, bundle.trains),
    ]
    try:
        for collection_name, items in batches:
            if items is None:
                continue
            count = db.insert_documents(collection_name, [item.to_document() for item in items])
            logger.info("Inserted %d documents into %s", count, collection_name)
    except Exception as e:
        logger.exception("Error inserting data")
        return error_response(e)
    return {"message": "✅ Data inserted successfully"}


@router.get("/api/data")
def get_data(db: Database = Depends(get_database), settings: Settings = Depends(get_settings)):
    try:
        logger.info("Fetching data from MongoDB...")
        section_controllers = db.get_documents(database.SECTION_CONTROLLERS)
        logger.info("Found %d section controllers", len(section_controllers))

        stations = db.get_documents(database.STATIONS)
        logger.info("Found %d stations", len(stations))

        trains = db.get_documents(database.TRAINS)
        logger.info("Found %d trains", len(trains))

        response = {
            "sectionControllers": [database.serialize_document(d) for d in section_controllers],
            "stations": [database.serialize_document(d) for d in stations],
            "trains": [database.serialize_document(d) for d in trains],
        }
    except Exception as e:
        logger.exception("Error fetching data")
        extra = {"mongoUri": "MongoDB URI is set" if settings.mongo_uri else "MongoDB URI is missing"}
        if not settings.is_production:
            extra["stack"] = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        return error_response(e, **extra)

    if not (section_controllers or stations or trains):
        return {"message": NO_DATA_MESSAGE, **response}
    return response


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=default_settings.port)
