from sqlalchemy import Column, String

from docservice.db.base import Base, BigIntegerId


class Author(Base):
    __tablename__ = "authors"

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    # Обратная связь author -> documents не хранится в модели:
    # документы автора выбираются через DocumentRepository.list_by_author

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name={self.name})"
