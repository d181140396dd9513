# mspdesk/app/scope.py
from dataclasses import dataclass

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from .db import get_db
from .models import Client


@dataclass(frozen=True)
class ClientScope:
    """The client a request is restricted to, passed explicitly to handlers."""
    client_id: int
    client_name: str


def get_client_scope(client_id: int, db: Session = Depends(get_db)) -> ClientScope:
    client = db.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="client not found")
    return ClientScope(client_id=client.id, client_name=client.name)
