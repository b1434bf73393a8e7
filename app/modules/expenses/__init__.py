# app/modules/expenses/__init__.py
"""
Módulo de Gastos - Gastos de una Hoja de Reclamo

Este módulo maneja los gastos detallados de cada hoja:
- Registro de gastos con numeración consecutiva por hoja
- Edición y eliminación (sin renumerar)
- Reordenamiento: renumeración 1..N en dos fases dentro de una transacción

Arquitectura:
- router.py: Endpoints de gastos
- service.py: Lógica de negocio y reordenamiento
- repository.py: Acceso a datos de gastos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import ExpensesService
from .repository import ExpensesRepository

__all__ = [
    "router",
    "ExpensesService",
    "ExpensesRepository"
]
