class DocumentNotFoundError(LookupError):
    """Документ с указанным идентификатором не существует"""

    def __init__(self, document_id: int):
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")
