# app/modules/expenses/service.py
from typing import Dict, Any, List
from sqlalchemy.orm import Session
import logging

from .repository import ExpensesRepository
from .schemas import (
    ExpenseCreateRequest, ExpenseUpdateRequest, ExpenseInfo,
    ExpenseResponse, ClaimSheetExpensesResponse
)
from app.core.exceptions import NotFoundError, InvalidArgumentError, ConflictError
from app.modules.claim_sheets.repository import ClaimSheetsRepository
from app.shared.database.models import ClaimSheet, ExpenseItem
from app.shared.database.transactions import atomic
from app.shared.schemas.common import MessageResponse

logger = logging.getLogger(__name__)


class ExpensesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ExpensesRepository(db)
        self.claim_sheets = ClaimSheetsRepository(db)

    def _lock_claim_sheet_or_404(self, claim_sheet_id: int) -> ClaimSheet:
        claim_sheet = self.claim_sheets.lock_claim_sheet(claim_sheet_id)
        if not claim_sheet:
            raise NotFoundError("Hoja de reclamo no encontrada")
        return claim_sheet

    def _get_expense_or_404(self, expense_id: int) -> ExpenseItem:
        expense = self.repository.get_expense(expense_id)
        if not expense:
            raise NotFoundError("Gasto no encontrado")
        return expense

    def _expenses_response(self, claim_sheet: ClaimSheet, message: str) -> ClaimSheetExpensesResponse:
        expenses = self.repository.get_expenses_by_claim_sheet(claim_sheet.id)
        return ClaimSheetExpensesResponse(
            success=True,
            message=message,
            claim_sheet_id=claim_sheet.id,
            expenses=[ExpenseInfo.from_orm(e) for e in expenses],
            total_amount=claim_sheet.total_amount
        )

    async def create_expense(self, expense_data: ExpenseCreateRequest) -> ExpenseResponse:
        """Crear gasto al final de la hoja (serial_no = max + 1)"""
        expense_dict = expense_data.dict()
        claim_sheet_id = expense_dict.pop('claim_sheet_id')

        with atomic(self.db, "crear gasto"):
            claim_sheet = self._lock_claim_sheet_or_404(claim_sheet_id)
            serial_no = self.repository.get_next_serial_no(claim_sheet_id)
            expense = self.repository.add_expense(expense_dict, claim_sheet_id, serial_no)
            self.claim_sheets.recalculate_total(claim_sheet)

        self.db.refresh(expense)
        logger.info(f"Gasto {expense.id} creado en hoja {claim_sheet_id} con serial_no {serial_no}")

        return ExpenseResponse(
            success=True,
            message="Gasto registrado exitosamente",
            expense=ExpenseInfo.from_orm(expense)
        )

    async def get_claim_sheet_expenses(self, claim_sheet_id: int) -> ClaimSheetExpensesResponse:
        claim_sheet = self.claim_sheets.get_claim_sheet(claim_sheet_id)
        if not claim_sheet:
            raise NotFoundError("Hoja de reclamo no encontrada")

        return self._expenses_response(claim_sheet, f"Gastos de la hoja {claim_sheet.claim_number}")

    async def get_expense(self, expense_id: int) -> ExpenseResponse:
        expense = self._get_expense_or_404(expense_id)
        return ExpenseResponse(success=True, expense=ExpenseInfo.from_orm(expense))

    async def update_expense(self, expense_id: int, update_data: ExpenseUpdateRequest) -> ExpenseResponse:
        """Actualizar campos descriptivos y monto; el total de la hoja se recalcula"""
        expense = self._get_expense_or_404(expense_id)
        changes: Dict[str, Any] = update_data.dict(exclude_unset=True, exclude_none=True)

        if changes:
            with atomic(self.db, "actualizar gasto"):
                claim_sheet = self._lock_claim_sheet_or_404(expense.claim_sheet_id)
                # releer con la hoja bloqueada: otro escritor pudo eliminarlo
                expense = self._get_expense_or_404(expense_id)
                self.repository.update_expense(expense, changes)
                if 'amount' in changes:
                    self.claim_sheets.recalculate_total(claim_sheet)
            self.db.refresh(expense)

        return ExpenseResponse(
            success=True,
            message="Gasto actualizado exitosamente",
            expense=ExpenseInfo.from_orm(expense)
        )

    async def delete_expense(self, expense_id: int) -> MessageResponse:
        """Eliminar gasto; los demás conservan su serial_no"""
        expense = self._get_expense_or_404(expense_id)
        claim_sheet_id = expense.claim_sheet_id

        with atomic(self.db, "eliminar gasto"):
            claim_sheet = self._lock_claim_sheet_or_404(claim_sheet_id)
            expense = self._get_expense_or_404(expense_id)
            self.repository.delete_expense(expense)
            self.claim_sheets.recalculate_total(claim_sheet)

        logger.info(f"Gasto {expense_id} eliminado de hoja {claim_sheet_id}")
        return MessageResponse(message="Gasto eliminado exitosamente")

    async def reorder_expenses(self, claim_sheet_id: int, expense_ids: List[int]) -> ClaimSheetExpensesResponse:
        """
        Renumerar los gastos de una hoja según expense_ids.

        Proceso (una sola transacción, con la hoja bloqueada):
        1. Validar la lista: no vacía, sin repetidos, exactamente los
           gastos actuales de la hoja
        2. Desplazamiento: todos los serial_no a negativo en un UPDATE
        3. Asignación: serial_no = posición (1..N) en el orden recibido
        4. Verificación: conteo desplazado igual a len(expense_ids) y ningún
           serial_no <= 0 restante
        5. Commit y lectura ordenada por serial_no

        Raises:
            InvalidArgumentError: lista vacía, con repetidos o incompleta
            NotFoundError: hoja inexistente o ID que no pertenece a la hoja
            ConflictError: violación de unicidad o la hoja cambió por un
                escritor concurrente después de la validación
        """
        if not expense_ids:
            raise InvalidArgumentError("La lista de gastos no puede estar vacía")

        if len(set(expense_ids)) != len(expense_ids):
            raise InvalidArgumentError("La lista de gastos contiene IDs repetidos")

        with atomic(self.db, f"reordenar gastos de hoja {claim_sheet_id}"):
            claim_sheet = self._lock_claim_sheet_or_404(claim_sheet_id)

            current_ids = {e.id for e in self.repository.get_expenses_by_claim_sheet(claim_sheet_id)}

            unknown = [expense_id for expense_id in expense_ids if expense_id not in current_ids]
            if unknown:
                raise NotFoundError(f"Gastos no encontrados en la hoja: {unknown}")

            omitted = sorted(current_ids - set(expense_ids))
            if omitted:
                raise InvalidArgumentError(f"Faltan gastos de la hoja en el nuevo orden: {omitted}")

            # un alta o baja de otro escritor posterior a la validación cambia el conteo
            displaced = self.repository.displace_serial_numbers(claim_sheet_id)
            if displaced != len(expense_ids):
                raise ConflictError(
                    f"La hoja {claim_sheet_id} cambió durante el reordenamiento "
                    f"({displaced} gastos en lugar de {len(expense_ids)}), reintente"
                )

            for position, expense_id in enumerate(expense_ids, start=1):
                if not self.repository.assign_serial_no(expense_id, claim_sheet_id, position):
                    raise ConflictError(f"Gasto {expense_id} eliminado durante el reordenamiento, reintente")

            pending = self.repository.count_unassigned_serials(claim_sheet_id)
            if pending:
                raise ConflictError(f"{pending} gastos quedaron sin numerar en la hoja {claim_sheet_id}, reintente")

        logger.info(f"Hoja {claim_sheet_id}: {len(expense_ids)} gastos reordenados")
        return self._expenses_response(claim_sheet, "Orden de gastos actualizado exitosamente")
