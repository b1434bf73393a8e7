# app/modules/claim_sheets/service.py
from typing import Dict, Any
from sqlalchemy.orm import Session

from .repository import ClaimSheetsRepository
from .schemas import (
    ClaimSheetCreateRequest, ClaimSheetUpdateRequest, ClaimSheetInfo,
    ClaimSheetResponse, ClaimSheetListResponse
)
from app.core.exceptions import NotFoundError
from app.shared.database.models import ClaimSheet
from app.shared.schemas.common import MessageResponse


class ClaimSheetsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ClaimSheetsRepository(db)

    def get_claim_sheet_or_404(self, claim_sheet_id: int) -> ClaimSheet:
        claim_sheet = self.repository.get_claim_sheet(claim_sheet_id)
        if not claim_sheet:
            raise NotFoundError("Hoja de reclamo no encontrada")
        return claim_sheet

    async def create_claim_sheet(self, claim_sheet_data: ClaimSheetCreateRequest) -> ClaimSheetResponse:
        """Crear hoja de reclamo en estado Draft"""
        claim_sheet = self.repository.create_claim_sheet(claim_sheet_data.dict())

        return ClaimSheetResponse(
            success=True,
            message="Hoja de reclamo creada exitosamente",
            claim_sheet=ClaimSheetInfo.from_orm(claim_sheet)
        )

    async def list_claim_sheets(self) -> ClaimSheetListResponse:
        claim_sheets = self.repository.get_claim_sheets()

        return ClaimSheetListResponse(
            success=True,
            message=f"{len(claim_sheets)} hojas de reclamo",
            claim_sheets=[ClaimSheetInfo.from_orm(cs) for cs in claim_sheets],
            total=len(claim_sheets)
        )

    async def get_claim_sheet(self, claim_sheet_id: int) -> ClaimSheetResponse:
        claim_sheet = self.get_claim_sheet_or_404(claim_sheet_id)

        return ClaimSheetResponse(
            success=True,
            claim_sheet=ClaimSheetInfo.from_orm(claim_sheet)
        )

    async def update_claim_sheet(
        self,
        claim_sheet_id: int,
        update_data: ClaimSheetUpdateRequest
    ) -> ClaimSheetResponse:
        """Actualización parcial: solo los campos enviados"""
        claim_sheet = self.get_claim_sheet_or_404(claim_sheet_id)
        changes: Dict[str, Any] = update_data.dict(exclude_unset=True, exclude_none=True)

        if changes:
            claim_sheet = self.repository.update_claim_sheet(claim_sheet, changes)

        return ClaimSheetResponse(
            success=True,
            message="Hoja de reclamo actualizada exitosamente",
            claim_sheet=ClaimSheetInfo.from_orm(claim_sheet)
        )

    async def delete_claim_sheet(self, claim_sheet_id: int) -> MessageResponse:
        claim_sheet = self.get_claim_sheet_or_404(claim_sheet_id)
        self.repository.delete_claim_sheet(claim_sheet)

        return MessageResponse(message="Hoja de reclamo eliminada exitosamente")
