from pydantic import BaseModel, Field, validator
from typing import Optional, List, Literal
from decimal import Decimal
from datetime import datetime
from app.shared.schemas.common import BaseResponse

ClaimStatus = Literal["Draft", "Submitted", "Approved", "Rejected"]


def _not_blank(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError('El campo no puede estar vacío')
    return v.strip()


class ClaimSheetCreateRequest(BaseModel):
    name: str = Field(..., max_length=255, description="Nombre de la hoja de reclamo")
    claim_number: str = Field(..., max_length=100, description="Número de reclamo único")
    claim_type: str = Field(..., max_length=100, description="Tipo de reclamo")

    @validator('name', 'claim_number', 'claim_type')
    def validate_not_blank(cls, v):
        return _not_blank(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Viaje a Bangalore - Marzo",
                "claim_number": "CLM-2024-001",
                "claim_type": "Travel"
            }
        }


class ClaimSheetUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    claim_number: Optional[str] = Field(None, max_length=100)
    claim_type: Optional[str] = Field(None, max_length=100)
    status: Optional[ClaimStatus] = None

    @validator('name', 'claim_number', 'claim_type')
    def validate_not_blank(cls, v):
        return _not_blank(v)


class ClaimSheetInfo(BaseModel):
    id: int
    name: str
    claim_number: str
    claim_type: str
    status: str
    total_amount: Decimal
    expenses_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ClaimSheetResponse(BaseResponse):
    claim_sheet: ClaimSheetInfo


class ClaimSheetListResponse(BaseResponse):
    claim_sheets: List[ClaimSheetInfo]
    total: int
