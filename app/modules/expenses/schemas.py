from pydantic import BaseModel, Field, validator
from typing import Optional, List
from decimal import Decimal
from datetime import datetime, date as Date
from app.shared.schemas.common import BaseResponse

class ExpenseCreateRequest(BaseModel):
    claim_sheet_id: int = Field(..., description="Hoja de reclamo a la que pertenece")
    bill_no: str = Field(..., max_length=100, description="Número de factura")
    date: Date = Field(..., description="Fecha de la factura")
    issued_by: str = Field(..., max_length=255, description="Emisor de la factura")
    details: str = Field(..., description="Detalle del gasto")
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Monto del gasto")

    @validator('bill_no', 'issued_by', 'details')
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('El campo no puede estar vacío')
        return v.strip()


class ExpenseUpdateRequest(BaseModel):
    """claim_sheet_id y serial_no no se editan aquí; el orden cambia con /reorder"""
    bill_no: Optional[str] = Field(None, max_length=100)
    date: Optional[Date] = None
    issued_by: Optional[str] = Field(None, max_length=255)
    details: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)

    @validator('bill_no', 'issued_by', 'details')
    def validate_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('El campo no puede estar vacío')
        return v.strip() if v is not None else v


class ExpenseReorderRequest(BaseModel):
    expense_ids: List[int] = Field(..., description="IDs de todos los gastos de la hoja en el nuevo orden")

    class Config:
        json_schema_extra = {
            "example": {
                "expense_ids": [12, 10, 11]
            }
        }


class ExpenseInfo(BaseModel):
    id: int
    claim_sheet_id: int
    serial_no: int
    bill_no: str
    date: Date
    issued_by: str
    details: str
    amount: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseResponse(BaseResponse):
    expense: ExpenseInfo


class ClaimSheetExpensesResponse(BaseResponse):
    claim_sheet_id: int
    expenses: List[ExpenseInfo]
    total_amount: Decimal
