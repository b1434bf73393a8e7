# app/modules/claim_sheets/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Dict, Any, Optional
from decimal import Decimal
import logging

from app.shared.database.models import ClaimSheet, ExpenseItem
from app.shared.database.transactions import atomic

logger = logging.getLogger(__name__)

class ClaimSheetsRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_claim_sheet(self, claim_sheet_data: Dict[str, Any]) -> ClaimSheet:
        """Crear nueva hoja de reclamo"""
        claim_sheet = ClaimSheet(
            name=claim_sheet_data['name'],
            claim_number=claim_sheet_data['claim_number'],
            claim_type=claim_sheet_data['claim_type'],
            status='Draft',
            total_amount=Decimal("0")
        )

        with atomic(
            self.db,
            "crear hoja de reclamo",
            conflict_detail=f"Ya existe una hoja con el número {claim_sheet_data['claim_number']}"
        ):
            self.db.add(claim_sheet)

        self.db.refresh(claim_sheet)
        logger.info(f"Hoja de reclamo creada con ID: {claim_sheet.id}")
        return claim_sheet

    def get_claim_sheets(self) -> List[ClaimSheet]:
        """Obtener hojas de reclamo, más recientes primero"""
        return self.db.query(ClaimSheet).order_by(
            ClaimSheet.created_at.desc(), ClaimSheet.id.desc()
        ).all()

    def get_claim_sheet(self, claim_sheet_id: int) -> Optional[ClaimSheet]:
        return self.db.query(ClaimSheet).filter(ClaimSheet.id == claim_sheet_id).first()

    def lock_claim_sheet(self, claim_sheet_id: int) -> Optional[ClaimSheet]:
        """
        Obtener la hoja con SELECT FOR UPDATE.

        Toda escritura sobre serial_no de una hoja (crear gasto, reordenar)
        toma este bloqueo primero; hojas distintas no comparten bloqueo.
        """
        return self.db.query(ClaimSheet).filter(
            ClaimSheet.id == claim_sheet_id
        ).with_for_update().first()

    def update_claim_sheet(self, claim_sheet: ClaimSheet, changes: Dict[str, Any]) -> ClaimSheet:
        """Actualizar campos de la hoja"""
        with atomic(
            self.db,
            "actualizar hoja de reclamo",
            conflict_detail=f"Ya existe una hoja con el número {changes.get('claim_number')}"
        ):
            for field, value in changes.items():
                setattr(claim_sheet, field, value)

        self.db.refresh(claim_sheet)
        return claim_sheet

    def delete_claim_sheet(self, claim_sheet: ClaimSheet) -> None:
        """Eliminar la hoja y todos sus gastos"""
        claim_sheet_id = claim_sheet.id
        with atomic(self.db, "eliminar hoja de reclamo"):
            self.db.delete(claim_sheet)
        logger.info(f"Hoja de reclamo {claim_sheet_id} eliminada")

    def recalculate_total(self, claim_sheet: ClaimSheet) -> Decimal:
        """
        Recalcular total_amount como la suma de los gastos de la hoja.
        No hace commit; se llama dentro de la transacción del cambio.
        """
        self.db.flush()
        total = self.db.query(
            func.coalesce(func.sum(ExpenseItem.amount), 0)
        ).filter(ExpenseItem.claim_sheet_id == claim_sheet.id).scalar()

        claim_sheet.total_amount = Decimal(str(total)).quantize(Decimal("0.01"))
        return claim_sheet.total_amount
