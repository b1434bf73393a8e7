# app/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Text,
    Numeric, ForeignKey, UniqueConstraint, CheckConstraint,
    func
)
from sqlalchemy.orm import relationship

from app.config.database import Base

# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# HOJAS DE RECLAMO
# =====================================================

CLAIM_SHEET_STATUSES = ("Draft", "Submitted", "Approved", "Rejected")


class ClaimSheet(Base, TimestampMixin):
    """Modelo de Hoja de Reclamo"""
    __tablename__ = "claim_sheets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    claim_number = Column(String(100), unique=True, nullable=False, index=True)
    claim_type = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default='Draft')
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    expenses = relationship(
        "ExpenseItem",
        back_populates="claim_sheet",
        order_by="ExpenseItem.serial_no",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            f"status IN {CLAIM_SHEET_STATUSES}",
            name='ck_claim_sheets_status'
        ),
    )

    @property
    def expenses_count(self) -> int:
        return len(self.expenses)


# =====================================================
# GASTOS
# =====================================================

class ExpenseItem(Base, TimestampMixin):
    """Modelo de Gasto de una hoja de reclamo.

    serial_no es único por hoja; el reordenamiento lo pasa por valores
    negativos dentro de una transacción, por eso no lleva CHECK > 0.
    """
    __tablename__ = "expense_items"

    id = Column(Integer, primary_key=True, index=True)
    claim_sheet_id = Column(Integer, ForeignKey("claim_sheets.id", ondelete="CASCADE"), nullable=False, index=True)
    serial_no = Column(Integer, nullable=False)
    bill_no = Column(String(100), nullable=False)
    date = Column(Date, nullable=False)
    issued_by = Column(String(255), nullable=False)
    details = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    # Relationships
    claim_sheet = relationship("ClaimSheet", back_populates="expenses")

    __table_args__ = (
        UniqueConstraint('claim_sheet_id', 'serial_no', name='uq_expense_items_sheet_serial'),
        CheckConstraint('amount >= 0', name='ck_expense_items_amount'),
    )
