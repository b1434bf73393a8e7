# app/modules/claim_sheets/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.shared.schemas.common import MessageResponse
from .service import ClaimSheetsService
from .schemas import (
    ClaimSheetCreateRequest, ClaimSheetUpdateRequest,
    ClaimSheetResponse, ClaimSheetListResponse
)

router = APIRouter()

@router.get("", response_model=ClaimSheetListResponse)
async def list_claim_sheets(db: Session = Depends(get_db)):
    """Listar hojas de reclamo, más recientes primero"""
    service = ClaimSheetsService(db)
    return await service.list_claim_sheets()

@router.post("", response_model=ClaimSheetResponse, status_code=status.HTTP_201_CREATED)
async def create_claim_sheet(
    claim_sheet_data: ClaimSheetCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Crear hoja de reclamo

    **Validaciones:**
    - name, claim_number y claim_type requeridos y no vacíos
    - claim_number único (409 si ya existe)
    - Estado inicial: Draft
    """
    service = ClaimSheetsService(db)
    return await service.create_claim_sheet(claim_sheet_data)

@router.get("/{claim_sheet_id}", response_model=ClaimSheetResponse)
async def get_claim_sheet(claim_sheet_id: int, db: Session = Depends(get_db)):
    service = ClaimSheetsService(db)
    return await service.get_claim_sheet(claim_sheet_id)

@router.put("/{claim_sheet_id}", response_model=ClaimSheetResponse)
async def update_claim_sheet(
    claim_sheet_id: int,
    update_data: ClaimSheetUpdateRequest,
    db: Session = Depends(get_db)
):
    """Actualizar nombre, número, tipo o estado de la hoja"""
    service = ClaimSheetsService(db)
    return await service.update_claim_sheet(claim_sheet_id, update_data)

@router.delete("/{claim_sheet_id}", response_model=MessageResponse)
async def delete_claim_sheet(claim_sheet_id: int, db: Session = Depends(get_db)):
    """Eliminar la hoja y todos sus gastos"""
    service = ClaimSheetsService(db)
    return await service.delete_claim_sheet(claim_sheet_id)
