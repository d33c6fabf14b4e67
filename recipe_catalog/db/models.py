# models.py
# SQLAlchemy model backing the SQL document store.

from sqlalchemy import Column, String, JSON, Index

from recipe_catalog.db.session import Base


class DocumentRecord(Base):
    """
    One document of one collection. The document body lives in `data`;
    the document id is not repeated inside it.
    """
    __tablename__ = "documents"

    collection = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)
    data = Column(JSON, nullable=False)

    __table_args__ = (
        Index("ix_documents_collection", "collection"),
    )

    def __str__(self):
        return f"{self.collection}/{self.id}"
