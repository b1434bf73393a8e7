# app/modules/expenses/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import and_, func
from typing import List, Dict, Any, Optional
import logging

from app.shared.database.models import ExpenseItem

logger = logging.getLogger(__name__)

class ExpensesRepository:
    """
    Acceso a gastos de una hoja.

    Los métodos de escritura no hacen commit: el servicio los agrupa dentro
    de una transacción con el bloqueo de la hoja ya tomado.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_expenses_by_claim_sheet(self, claim_sheet_id: int) -> List[ExpenseItem]:
        """Gastos de la hoja ordenados por serial_no ascendente"""
        return self.db.query(ExpenseItem).filter(
            ExpenseItem.claim_sheet_id == claim_sheet_id
        ).order_by(ExpenseItem.serial_no.asc()).all()

    def get_expense(self, expense_id: int) -> Optional[ExpenseItem]:
        return self.db.query(ExpenseItem).filter(ExpenseItem.id == expense_id).first()

    def get_next_serial_no(self, claim_sheet_id: int) -> int:
        """max(serial_no) + 1, o 1 si la hoja no tiene gastos"""
        last_serial = self.db.query(func.max(ExpenseItem.serial_no)).filter(
            ExpenseItem.claim_sheet_id == claim_sheet_id
        ).scalar()
        return (last_serial or 0) + 1

    def add_expense(self, expense_data: Dict[str, Any], claim_sheet_id: int, serial_no: int) -> ExpenseItem:
        expense = ExpenseItem(
            claim_sheet_id=claim_sheet_id,
            serial_no=serial_no,
            bill_no=expense_data['bill_no'],
            date=expense_data['date'],
            issued_by=expense_data['issued_by'],
            details=expense_data['details'],
            amount=expense_data['amount']
        )
        self.db.add(expense)
        self.db.flush()  # Obtener expense.id y validar unicidad
        return expense

    def update_expense(self, expense: ExpenseItem, changes: Dict[str, Any]) -> ExpenseItem:
        for field, value in changes.items():
            setattr(expense, field, value)
        self.db.flush()
        return expense

    def delete_expense(self, expense: ExpenseItem) -> None:
        """Eliminar sin renumerar a los hermanos; el hueco queda hasta el próximo reorden"""
        self.db.delete(expense)
        self.db.flush()

    def displace_serial_numbers(self, claim_sheet_id: int) -> int:
        """
        Fase de desplazamiento: serial_no = -serial_no para toda la hoja.

        Un solo UPDATE masivo deja libre el rango positivo. Como los
        valores de partida son positivos y distintos, los negados tampoco
        colisionan entre sí.
        """
        displaced = self.db.query(ExpenseItem).filter(
            ExpenseItem.claim_sheet_id == claim_sheet_id
        ).update(
            {ExpenseItem.serial_no: -ExpenseItem.serial_no},
            synchronize_session=False
        )
        logger.info(f"Hoja {claim_sheet_id}: {displaced} gastos desplazados a serial_no negativo")
        return displaced

    def assign_serial_no(self, expense_id: int, claim_sheet_id: int, serial_no: int) -> bool:
        """
        Fase de asignación para un gasto.

        Returns:
            bool: False si el gasto no existe bajo esa hoja
        """
        updated = self.db.query(ExpenseItem).filter(
            and_(
                ExpenseItem.id == expense_id,
                ExpenseItem.claim_sheet_id == claim_sheet_id
            )
        ).update(
            {ExpenseItem.serial_no: serial_no},
            synchronize_session=False
        )
        return updated == 1

    def count_unassigned_serials(self, claim_sheet_id: int) -> int:
        """Gastos de la hoja que siguen con serial_no <= 0 tras la asignación"""
        return self.db.query(func.count(ExpenseItem.id)).filter(
            and_(
                ExpenseItem.claim_sheet_id == claim_sheet_id,
                ExpenseItem.serial_no <= 0
            )
        ).scalar()
