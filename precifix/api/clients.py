"""
Precifix Server - Clients API
CRUD de clientes e seus veiculos
"""
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_

from precifix.database import get_db
from precifix.models import Client, Vehicle, Quote, User
from precifix.schemas import ClientCreate, ClientUpdate, ClientResponse, VehicleIn, VehicleResponse
from precifix.api.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])


async def _get_client(db: AsyncSession, user: User, client_id: str) -> Client:
    result = await db.execute(
        select(Client).where(Client.id == client_id, Client.user_id == user.id)
    )
    client = result.scalar_one_or_none()

    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return client


def _sync_vehicles(client: Client, vehicles_in: List[VehicleIn], user: User) -> List[str]:
    """
    Aplica a lista final de veiculos: com id atualiza, sem id cria e
    os que ficaram de fora sao removidos (delete-orphan).
    Retorna os ids removidos.
    """
    existing = {v.id: v for v in client.vehicles or []}
    kept = []

    for item in vehicles_in:
        data = item.model_dump(exclude={"id"})
        if item.id:
            vehicle = existing.get(item.id)
            if not vehicle:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Vehicle {item.id} not found for this client"
                )
            for field, value in data.items():
                setattr(vehicle, field, value)
        else:
            vehicle = Vehicle(user_id=user.id, **data)
        kept.append(vehicle)

    kept_ids = {v.id for v in kept if v.id}
    removed = [vehicle_id for vehicle_id in existing if vehicle_id not in kept_ids]
    client.vehicles = kept
    return removed


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    search: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Lista clientes do usuario"""
    query = select(Client).where(Client.user_id == user.id)

    if search:
        query = query.where(
            or_(
                Client.name.ilike(f"%{search}%"),
                Client.document.ilike(f"%{search}%"),
                Client.phone.ilike(f"%{search}%"),
                Client.email.ilike(f"%{search}%")
            )
        )

    query = query.order_by(Client.name).offset(skip).limit(limit)

    result = await db.execute(query)
    clients = result.scalars().all()

    return [c.to_dict() for c in clients]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Retorna um cliente com seus veiculos"""
    client = await _get_client(db, user, client_id)
    return client.to_dict()


@router.get("/{client_id}/vehicles", response_model=List[VehicleResponse])
async def list_client_vehicles(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Veiculos de um cliente (tela de orcamento)"""
    client = await _get_client(db, user, client_id)
    return [v.to_dict() for v in client.vehicles]


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    request: ClientCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Cria cliente e veiculos na mesma transacao"""
    data = request.model_dump(exclude={"vehicles"})
    client = Client(user_id=user.id, **data)
    client.vehicles = [
        Vehicle(user_id=user.id, **v.model_dump(exclude={"id"}))
        for v in request.vehicles
    ]

    db.add(client)
    await db.commit()

    logger.info(f"Cliente criado: {client.id} ({len(client.vehicles)} veiculos)")
    return client.to_dict()


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    request: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Atualiza cliente; `vehicles` informado substitui a lista de veiculos"""
    client = await _get_client(db, user, client_id)

    update_data = request.model_dump(exclude_unset=True, exclude={"vehicles"})
    for field, value in update_data.items():
        setattr(client, field, value)

    if request.vehicles is not None:
        removed = _sync_vehicles(client, request.vehicles, user)
        if removed:
            await db.execute(
                update(Quote)
                .where(Quote.user_id == user.id, Quote.vehicle_id.in_(removed))
                .values(vehicle_id=None)
            )

    await db.commit()

    return client.to_dict()


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Remove cliente e veiculos; orcamentos mantem a copia dos dados"""
    client = await _get_client(db, user, client_id)

    await db.execute(
        update(Quote)
        .where(Quote.user_id == user.id, Quote.client_id == client.id)
        .values(client_id=None, vehicle_id=None)
    )
    await db.delete(client)
    await db.commit()

    logger.info(f"Cliente removido: {client_id}")
