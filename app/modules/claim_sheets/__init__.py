# app/modules/claim_sheets/__init__.py
"""
Módulo de Hojas de Reclamo

Una hoja de reclamo agrupa los gastos que se presentan juntos:
- Alta, consulta, edición y eliminación de hojas
- Estado del reclamo (Draft, Submitted, Approved, Rejected)
- Total acumulado de sus gastos

Arquitectura:
- router.py: Endpoints de hojas
- service.py: Lógica de negocio
- repository.py: Acceso a datos y bloqueo por hoja
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import ClaimSheetsService
from .repository import ClaimSheetsRepository

__all__ = [
    "router",
    "ClaimSheetsService",
    "ClaimSheetsRepository"
]
