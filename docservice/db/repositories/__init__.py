from docservice.db.repositories.author_repository import AuthorRepository
from docservice.db.repositories.tag_repository import TagRepository
from docservice.db.repositories.document_repository import DocumentRepository

__all__ = [
    "AuthorRepository",
    "TagRepository",
    "DocumentRepository"
]
