from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from retaguarda.config import get_settings

SQLALCHEMY_DATABASE_URL = get_settings().database_url

# connect_args={"check_same_thread": False} é necessário só para SQLite
connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base declarativa de todos os modelos
Base = declarative_base()


# Dependência para obter a sessão nos endpoints
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
