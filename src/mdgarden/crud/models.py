"""Database table definitions for the local publish ledger"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class PublishedNote(SQLModel, table=True):
    """Last compiled state of a note written to the output directory"""
    __tablename__ = "published_notes"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    asset_count: int = Field(default=0, nullable=False)
    compiled_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class PublishedAsset(SQLModel, table=True):
    """An image written under its canonical publish path, keyed by that path"""
    __tablename__ = "published_assets"
    path: str = Field(primary_key=True)
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    note_path: Optional[str] = Field(default=None, description="Note that last referenced the asset")
    compiled_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
