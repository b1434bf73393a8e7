# app/modules/expenses/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.shared.schemas.common import MessageResponse
from .service import ExpensesService
from .schemas import (
    ExpenseCreateRequest, ExpenseUpdateRequest, ExpenseReorderRequest,
    ExpenseResponse, ClaimSheetExpensesResponse
)

router = APIRouter()

@router.get("/claim-sheet/{claim_sheet_id}", response_model=ClaimSheetExpensesResponse)
async def get_claim_sheet_expenses(claim_sheet_id: int, db: Session = Depends(get_db)):
    """Gastos de una hoja ordenados por serial_no"""
    service = ExpensesService(db)
    return await service.get_claim_sheet_expenses(claim_sheet_id)

@router.put("/reorder/{claim_sheet_id}", response_model=ClaimSheetExpensesResponse)
async def reorder_expenses(
    claim_sheet_id: int,
    reorder_data: ExpenseReorderRequest,
    db: Session = Depends(get_db)
):
    """
    Reordenar los gastos de una hoja

    **Body:** todos los IDs de gastos de la hoja en el nuevo orden.

    **Resultado:**
    - serial_no = 1..N en el orden recibido
    - 400 si la lista está vacía, tiene repetidos u omite gastos de la hoja
    - 404 si la hoja no existe o un ID no pertenece a la hoja
    - 409 si un escritor concurrente violó la unicidad (se puede reintentar)
    """
    service = ExpensesService(db)
    return await service.reorder_expenses(claim_sheet_id, reorder_data.expense_ids)

@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(expense_data: ExpenseCreateRequest, db: Session = Depends(get_db)):
    """
    Registrar gasto en una hoja

    **Incluye:**
    - serial_no siguiente al último de la hoja
    - Recalculo del total de la hoja
    """
    service = ExpensesService(db)
    return await service.create_expense(expense_data)

@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(expense_id: int, db: Session = Depends(get_db)):
    service = ExpensesService(db)
    return await service.get_expense(expense_id)

@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    update_data: ExpenseUpdateRequest,
    db: Session = Depends(get_db)
):
    service = ExpensesService(db)
    return await service.update_expense(expense_id, update_data)

@router.delete("/{expense_id}", response_model=MessageResponse)
async def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    """Eliminar gasto sin renumerar los demás"""
    service = ExpensesService(db)
    return await service.delete_expense(expense_id)
