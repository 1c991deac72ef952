"""Engine construction and schema creation for the publish ledger"""

from sqlmodel import SQLModel, create_engine

from mdgarden.crud import models  # noqa: F401  registers tables on SQLModel.metadata


def make_engine(db_url: str):
    return create_engine(db_url, echo=False)


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)
