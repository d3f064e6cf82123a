import enum
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum, DateTime, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from retaguarda.database import Base


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    OPERATOR = "OPERATOR"


MANAGER_ROLES = (Role.ADMIN, Role.SUPERVISOR)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)

    password_hash = Column(String, nullable=False)

    role = Column(Enum(Role), default=Role.OPERATOR, nullable=False)

    is_active = Column(Boolean, default=True)
    salary = Column(Numeric(10, 2), default=0)  # Base da folha de pagamento
    terminal_id = Column(Integer, ForeignKey("terminals.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    terminal = relationship("Terminal", back_populates="operators")

    @property
    def display_name(self) -> str:
        return self.full_name or self.username
