from docservice.db.base import Base
from docservice.db.models.author import Author
from docservice.db.models.tag import Tag
from docservice.db.models.permission import Permission, PermissionType
from docservice.db.models.document import Document, document_tags

__all__ = [
    "Base",
    "Author",
    "Tag",
    "Permission",
    "PermissionType",
    "Document",
    "document_tags"
]
