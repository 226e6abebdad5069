from sqlalchemy import JSON, Column, Index, Integer, String, UniqueConstraint
from .database import Base


class EntityRecord(Base):
    __tablename__ = "entity_record"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String, nullable=False)
    id = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    owner_id = Column(String, nullable=True)
    body = Column(JSON, nullable=False)

    __table_args__ = (
        UniqueConstraint("collection", "id", name="uq_entity_record_collection_id"),
        Index("idx_entity_record_collection_position", "collection", "position"),
        Index("idx_entity_record_owner", "collection", "owner_id"),
    )
