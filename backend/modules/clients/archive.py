"""
modules/clients/archive.py - Trash adapter for clients.

Quotes keep their client_id when a client is trashed; the client name shows
as missing until the client is restored.
"""

from core.base import TrashCollection
from core.interfaces.trash_bin import ArchiveAdapter
from modules.clients.models import Client
from modules.clients.schemas import ClientResponse


class ClientArchiveAdapter(ArchiveAdapter[ClientResponse]):
    collection = TrashCollection.CLIENTS
    schema = ClientResponse

    def load(self, db, original_id: int):
        return db.get(Client, original_id)

    def remove(self, db, record) -> None:
        db.delete(record)

    def reinstate(self, db, original_id: int, snapshot: ClientResponse):
        client = Client(id=original_id, **snapshot.model_dump(exclude={"id"}))
        db.add(client)
        return client
