# retaguarda/models/organization.py
from sqlalchemy import Column, Integer, String, Boolean, Numeric
from sqlalchemy.orm import relationship
from retaguarda.database import Base


class Terminal(Base):
    """Ponto de caixa físico. Guarda o fundo de troco deixado no último fechamento."""

    __tablename__ = "terminals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    is_active = Column(Boolean, default=True)

    # Reserva informada no fechamento; semente do saldo inicial do próximo turno
    next_opening_balance = Column(Numeric(10, 2), default=0, nullable=False)

    operators = relationship("User", back_populates="terminal")
