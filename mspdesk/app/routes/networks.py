# mspdesk/app/routes/networks.py
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..activity import ActionType, ResourceType, get_actor, log_activity
from ..db import get_db
from ..models import Network, Subnet
from ..schemas import NetworkIn, NetworkUpdate, SubnetIn
from ..scope import ClientScope, get_client_scope

logger = logging.getLogger(__name__)

router = APIRouter(tags=["networks"])


def network_out(n: Network) -> dict:
    return {
        "id": n.id,
        "client_id": n.client_id,
        "network_type": n.network_type,
        "name": n.name,
        "description": n.description,
        "subnets": [
            {
                "id": s.id,
                "subnet_address": s.subnet_address,
                "gateway": s.gateway,
                "dns": list(s.dns or []),
                "dhcp_range": s.dhcp_range,
                "vlan": s.vlan,
            }
            for s in n.subnets
        ],
    }


def delete_subnets(db: Session, network_id: int):
    db.query(Subnet).filter(Subnet.network_id == network_id).delete(synchronize_session=False)


def insert_subnets(db: Session, network_id: int, subnets: list[SubnetIn]):
    db.add_all([Subnet(network_id=network_id, **s.model_dump()) for s in subnets])
    db.flush()


@router.get("/api/clients/{client_id}/networks")
def list_networks(network_type: Optional[Literal["LAN", "WAN"]] = None,
                  scope: ClientScope = Depends(get_client_scope), db: Session = Depends(get_db)):
    q = db.query(Network).filter(Network.client_id == scope.client_id)
    if network_type:
        q = q.filter(Network.network_type == network_type)
    return [network_out(n) for n in q.order_by(Network.name).all()]


@router.post("/api/clients/{client_id}/networks", status_code=201)
def create_network(body: NetworkIn, scope: ClientScope = Depends(get_client_scope),
                   db: Session = Depends(get_db), actor: Optional[str] = Depends(get_actor)):
    n = Network(client_id=scope.client_id, network_type=body.network_type,
                name=body.name, description=body.description)
    try:
        db.add(n)
        db.flush()
        insert_subnets(db, n.id, body.subnets)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("store error creating network for client %s, rolled back", scope.client_id)
        raise
    except Exception:
        db.rollback()
        logger.exception("error creating network for client %s", scope.client_id)
        raise HTTPException(status_code=500, detail="error creating network")
    db.refresh(n)
    log_activity(db, actor, ActionType.CREATE, ResourceType.NETWORK, n.id, f"Created new network: {n.name}")
    return network_out(n)


@router.get("/api/networks/{network_id}")
def get_network(network_id: int, db: Session = Depends(get_db)):
    n = db.get(Network, network_id)
    if not n:
        raise HTTPException(status_code=404, detail="network not found")
    return network_out(n)


@router.put("/api/networks/{network_id}")
def update_network(network_id: int, body: NetworkUpdate, db: Session = Depends(get_db),
                   actor: Optional[str] = Depends(get_actor)):
    n = db.get(Network, network_id)
    if not n:
        raise HTTPException(status_code=404, detail="network not found")

    # fields and the full subnet set are replaced in one transaction
    try:
        n.name = body.name
        n.description = body.description
        delete_subnets(db, n.id)
        insert_subnets(db, n.id, body.subnets)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("store error updating network %s, rolled back", network_id)
        raise
    except Exception:
        db.rollback()
        logger.exception("error updating network %s, rolled back", network_id)
        raise HTTPException(status_code=500, detail="error updating network")

    db.refresh(n)
    log_activity(db, actor, ActionType.UPDATE, ResourceType.NETWORK, n.id, f"Updated network: {n.name}")
    return network_out(n)


@router.delete("/api/networks/{network_id}")
def delete_network(network_id: int, db: Session = Depends(get_db),
                   actor: Optional[str] = Depends(get_actor)):
    n = db.get(Network, network_id)
    if not n:
        raise HTTPException(status_code=404, detail="network not found")
    name = n.name
    db.delete(n)
    db.commit()
    log_activity(db, actor, ActionType.DELETE, ResourceType.NETWORK, network_id, f"Deleted network: {name}")
    return {"ok": True}
