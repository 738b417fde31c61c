"""
FastAPI backend: contacts REST API.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from api.config import BACKEND_FILE, BACKEND_MONGO, Settings, load_env

load_env()

from fastapi import Body, FastAPI, HTTPException, Request  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from pydantic import BaseModel  # noqa: E402

from contactbook.application import (  # noqa: E402
    ContactRepository,
    ContactService,
    ErrorKind,
    Invalid,
    NotFound,
    StorageUnavailable,
    id_policy_from_name,
)
from contactbook.domain import Contact  # noqa: E402
from contactbook.infrastructure import (  # noqa: E402
    InMemoryContactRepository,
    JsonFileContactRepository,
    MongoContactRepository,
)
from contactbook.infrastructure.persistence.mongo_repository import connect  # noqa: E402

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_UNAVAILABLE: 500,
}


def _build_repository(settings: Settings) -> tuple[ContactRepository, Any]:
    """Return (repository, closable resource or None) for the configured backend."""
    if settings.backend == BACKEND_MONGO:
        client, collection = connect(
            settings.mongodb_uri,
            settings.mongodb_db,
            settings.mongodb_collection,
            timeout_ms=settings.mongodb_timeout_ms,
        )
        return MongoContactRepository(collection), client
    if settings.backend == BACKEND_FILE:
        return JsonFileContactRepository(settings.contacts_file), None
    return InMemoryContactRepository(), None


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)
    repo, resource = _build_repository(settings)
    app.state.service = ContactService(repo, id_policy_from_name(settings.id_policy))
    logger.info(
        "Contacts backend: %s (id policy: %s)%s",
        settings.backend,
        settings.id_policy,
        f", file {settings.contacts_file}" if settings.backend == BACKEND_FILE else "",
    )
    try:
        yield
    finally:
        if resource is not None:
            resource.close()


app = FastAPI(title="Contacts API", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def _malformed_request(request: Request, exc: RequestValidationError):
    # Bodies are checked by the service's own rules; anything FastAPI rejects is malformed JSON.
    return JSONResponse(status_code=400, content={"detail": "Malformed request body"})


class ContactItem(BaseModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    favorite: bool = False
    createdAt: str | None = None
    updatedAt: str | None = None


def _to_item(contact: Contact) -> ContactItem:
    return ContactItem(
        id=contact.id,
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        favorite=contact.favorite,
        createdAt=contact.created_at.isoformat() if contact.created_at else None,
        updatedAt=contact.updated_at.isoformat() if contact.updated_at else None,
    )


def _unwrap(result: Contact | Invalid | NotFound | StorageUnavailable) -> ContactItem:
    if isinstance(result, (Invalid, NotFound, StorageUnavailable)):
        raise HTTPException(status_code=STATUS_BY_KIND[result.kind], detail=result.message)
    return _to_item(result)


def get_service(request: Request) -> ContactService:
    return request.app.state.service


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: contacts ---


@app.get("/contacts")
def list_contacts(request: Request) -> list[ContactItem]:
    result = get_service(request).list_contacts()
    if isinstance(result, StorageUnavailable):
        raise HTTPException(status_code=STATUS_BY_KIND[result.kind], detail=result.message)
    return [_to_item(c) for c in result]


@app.get("/contacts/{contact_id}")
def get_contact(contact_id: str, request: Request) -> ContactItem:
    return _unwrap(get_service(request).get_contact(contact_id))


@app.post("/contacts", status_code=201)
def create_contact(request: Request, body: Any = Body(None)) -> ContactItem:
    return _unwrap(get_service(request).create_contact(body))


@app.put("/contacts/{contact_id}")
def update_contact(contact_id: str, request: Request, body: Any = Body(None)) -> ContactItem:
    return _unwrap(get_service(request).update_contact(contact_id, body))


@app.patch("/contacts/{contact_id}/favorite")
def set_favorite(contact_id: str, request: Request, body: Any = Body(None)) -> ContactItem:
    return _unwrap(get_service(request).set_favorite(contact_id, body))


@app.delete("/contacts/{contact_id}")
def delete_contact(contact_id: str, request: Request) -> ContactItem:
    return _unwrap(get_service(request).delete_contact(contact_id))
