"""SQLAlchemy ORM models for bills, categories and depositors"""

import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CategoryRecord(Base):
    """Bill category"""

    __tablename__ = "categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    nome_categoria = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DepositorRecord(Base):
    """Counterparty referenced by bills"""

    __tablename__ = "depositantes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    descri = Column(Text, nullable=False)
    cidade = Column(Text, nullable=True)
    uf = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    bills = relationship("BillRecord", back_populates="depositor")


class BillRecord(Base):
    """Bill payable or receivable"""

    __tablename__ = "bills"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vendor_name = Column(Text, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    datapagamento = Column(Date, nullable=True)
    category = Column(Text, nullable=False, default="")
    id_categoria = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    id_depositante = Column(Uuid(as_uuid=True), ForeignKey("depositantes.id"), nullable=True)
    status = Column(Text, nullable=False, default="unpaid")
    tipo = Column(Text, nullable=False, default="pagar")
    numero_nota_fiscal = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    depositor = relationship("DepositorRecord", back_populates="bills")
