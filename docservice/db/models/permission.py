import enum

from sqlalchemy import Column, Enum, ForeignKey, Index

from docservice.db.base import Base, BigIntegerId


class PermissionType(enum.Enum):
    READ = "READ"
    WRITE = "WRITE"
    DELETE = "DELETE"
    ADMIN = "ADMIN"


class Permission(Base):
    __tablename__ = "permissions"
    __table_args__ = (
        Index("idx_permission_document", "document_id"),
    )

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    type = Column(
        Enum(PermissionType, native_enum=False, length=50, create_constraint=False),
        nullable=False,
    )
    document_id = Column(
        BigIntegerId,
        ForeignKey("documents.id", ondelete="CASCADE", name="fk_permission_document"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"Permission(id={self.id}, type={self.type}, document_id={self.document_id})"
