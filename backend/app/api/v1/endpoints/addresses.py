# backend/app/api/v1/endpoints/addresses.py
from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import address_crud
from app.db.models.user_model import User
from app.schemas.address_schema import AddressCreate, AddressResponse

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/add", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def add_address(
    address_in: AddressCreate,
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
):
    """Añade una dirección de envío a la libreta del usuario."""
    address = await address_crud.create_address(db, user.id, address_in)
    logger.info(f"📍 DIRECCIÓN: {user.email} añadió la dirección {address.id}")
    return address

@router.get("/get", response_model=List[AddressResponse])
async def get_addresses(
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
):
    return await address_crud.get_addresses_by_user(db, user.id)
