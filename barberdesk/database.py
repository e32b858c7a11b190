from sqlmodel import SQLModel, Session, create_engine

from barberdesk.config import DATABASE_URL


connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # necessário para SQLite + FastAPI
    connect_args = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)


def create_db_and_tables():
    # importa os modelos para registrar as tabelas no metadata
    from barberdesk import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


# uma sessão por requisição
def get_session():
    with Session(engine) as session:
        yield session
