from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Table, func
from sqlalchemy.orm import relationship

from docservice.db.base import Base, BigIntegerId
from docservice.db.models.permission import Permission, PermissionType
from docservice.db.models.tag import Tag


document_tags = Table(
    "document_tags",
    Base.metadata,
    Column(
        "document_id",
        BigIntegerId,
        ForeignKey("documents.id", ondelete="CASCADE", name="fk_document_tags_document"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        BigIntegerId,
        ForeignKey("tags.id", ondelete="CASCADE", name="fk_document_tags_tag"),
        primary_key=True,
    ),
    Index("idx_document_tags_document", "document_id"),
    Index("idx_document_tags_tag", "tag_id"),
)


class Document(Base):
    __tablename__ = "documents"

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    title = Column(String(500), nullable=False)
    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.now,
        server_default=func.current_timestamp(),
    )
    author_id = Column(
        BigIntegerId,
        ForeignKey("authors.id", name="fk_document_author"),
        nullable=False,
    )

    # Все связи ленивые: первое обращение к каждой из них - отдельный запрос
    author = relationship("Author", lazy="select")
    tags = relationship("Tag", secondary=document_tags, collection_class=set, lazy="select")
    permissions = relationship(
        "Permission",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=Permission.id,
        lazy="select",
    )

    def add_tag(self, tag: Tag) -> None:
        """Добавление тега (повторное добавление игнорируется)"""
        self.tags.add(tag)

    def add_permission(self, permission_type: PermissionType) -> Permission:
        """Добавление права доступа в конец списка"""
        permission = Permission(type=permission_type)
        self.permissions.append(permission)
        return permission

    def __repr__(self) -> str:
        return f"Document(id={self.id}, title={self.title}, author_id={self.author_id})"


Index("idx_document_created_at", Document.__table__.c.created_at.desc())
Index("idx_document_author", Document.__table__.c.author_id)
