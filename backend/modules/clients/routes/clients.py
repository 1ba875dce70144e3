"""Client CRUD endpoints."""

from typing import Optional
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.base import TrashCollection
from core.db import get_db, unit_of_work
from core.errors import NotFound
from core.registry import registry
from modules.clients.models import Client
from modules.clients.schemas import ClientCreate, ClientUpdate, ClientResponse

log = logging.getLogger("printdesk.api")
router = APIRouter(prefix="/clients", tags=["Clients"])


def _get_or_404(db: Session, client_id: int) -> Client:
    client = db.get(Client, client_id)
    if not client:
        raise NotFound("Client not found", client_id=client_id)
    return client


@router.get("", response_model=list[ClientResponse])
def list_clients(search: Optional[str] = None, db: Session = Depends(get_db)):
    """List clients by name, optionally filtered by a name/email substring."""
    query = db.query(Client)
    if search:
        pattern = f"%{search}%"
        query = query.filter(Client.name.ilike(pattern) | Client.email.ilike(pattern))
    return query.order_by(Client.name).all()


@router.post("", response_model=ClientResponse, status_code=201)
def create_client(data: ClientCreate, db: Session = Depends(get_db)):
    with unit_of_work(db):
        client = Client(**data.model_dump())
        db.add(client)
    db.refresh(client)
    log.info(f"Created client #{client.id} '{client.name}'")
    return client


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, client_id)


@router.patch("/{client_id}", response_model=ClientResponse)
def update_client(client_id: int, data: ClientUpdate, db: Session = Depends(get_db)):
    client = _get_or_404(db, client_id)
    with unit_of_work(db):
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(client, key, value)
    db.refresh(client)
    return client


@router.delete("/{client_id}")
def delete_client(client_id: int, db: Session = Depends(get_db)):
    """Move a client to the trash."""
    item = registry.require("TrashBin").trash(db, TrashCollection.CLIENTS, client_id)
    return {"status": "trashed", "trash_id": item.id}
