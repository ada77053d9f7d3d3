"""
Router para consultas ao registry de domínios (listings, frações, carteiras)
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from mainalysis.services.registry_client import RegistryClient, RegistryError, get_registry_client

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/registry/listings")
async def listings(
    take: int = Query(20, ge=1, le=100),
    skip: int = Query(0, ge=0),
    tlds: Optional[List[str]] = Query(None),
    sld: Optional[str] = Query(None),
    client: RegistryClient = Depends(get_registry_client),
):
    """Página de domínios listados (repassa a paginação do registry)."""
    try:
        return await client.fetch_listings(take=take, skip=skip, tlds=tlds, sld=sld)
    except RegistryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("/registry/listed")
async def is_listed(
    name: str = Query(..., min_length=1, description="SLD, ex: 'example'"),
    extension: str = Query(..., min_length=1, description="TLD, ex: '.ai'"),
    client: RegistryClient = Depends(get_registry_client),
):
    return {"listed": await client.check_domain_listed(name, extension)}


@router.get("/registry/fractional-tokens")
async def fractional_tokens(
    take: int = Query(20, ge=1, le=100),
    client: RegistryClient = Depends(get_registry_client),
):
    try:
        return {"items": await client.fetch_fractional_tokens(take=take)}
    except RegistryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("/registry/wallets/{wallet_address}/domains")
async def wallet_domains(
    wallet_address: str,
    client: RegistryClient = Depends(get_registry_client),
):
    try:
        return {"items": await client.fetch_wallet_domains(wallet_address)}
    except RegistryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
