"""
Uploaded document data models and schemas.
"""

from typing import List
from pydantic import BaseModel, Field


class UploadedDocumentDescriptor(BaseModel):
    """
    Metadata for a document attached to a request.

    The engine passes these through untouched; file contents are never kept.

    Attributes:
        filename: Original filename as sent by the client
        mimetype: MIME type reported by the client
        size: Size of the file in bytes
    """
    filename: str = Field(..., description="Original filename")
    mimetype: str = Field(..., description="Reported MIME type")
    size: int = Field(..., description="File size in bytes", ge=0)

    class Config:
        """Pydantic configuration."""
        frozen = True


class UploadedDocument(UploadedDocumentDescriptor):
    """
    Descriptor returned by the standalone upload endpoint.

    Attributes:
        uploadDate: ISO-8601 timestamp when the upload was received
    """
    uploadDate: str = Field(..., description="Upload timestamp")


class UploadResponse(BaseModel):
    """
    Response body of the upload endpoint.
    """
    message: str
    files: List[UploadedDocument]

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "message": "Documents uploaded successfully",
                "files": [
                    {
                        "filename": "w2.pdf",
                        "mimetype": "application/pdf",
                        "size": 48213,
                        "uploadDate": "2024-03-01T12:00:00.000Z"
                    }
                ]
            }
        }
