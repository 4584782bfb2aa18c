from sqlalchemy import Column, String

from docservice.db.base import Base, BigIntegerId


class Tag(Base):
    __tablename__ = "tags"

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"Tag(id={self.id}, name={self.name})"
