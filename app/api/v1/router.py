# app/api/v1/router.py
from fastapi import APIRouter
from app.modules.claim_sheets.router import router as claim_sheets_router
from app.modules.expenses.router import router as expenses_router


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(
    claim_sheets_router,
    prefix="/claim-sheets",
    tags=["Claim Sheets"]
)

api_router.include_router(
    expenses_router,
    prefix="/expenses",
    tags=["Expenses"]
)

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "Claim Settlement API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "claim_sheets": "/api/v1/claim-sheets",
            "expenses": "/api/v1/expenses",
            "reorder": "/api/v1/expenses/reorder/{claim_sheet_id}"
        }
    }

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "Claim Settlement API",
        "modules": {
            "claim_sheets": {
                "status": "active",
                "features": ["CRUD", "Estados", "Total acumulado"]
            },
            "expenses": {
                "status": "active",
                "features": ["CRUD", "Numeración por hoja", "Reordenamiento"]
            }
        }
    }
