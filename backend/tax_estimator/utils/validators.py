"""
File validation utilities.
"""

import os
from typing import List, Sequence
from fastapi import UploadFile, HTTPException, status

from tax_estimator.config import settings
from tax_estimator.models.document import UploadedDocumentDescriptor


# Allowed file types for upload
ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".pdf", ".doc", ".docx"}
ALLOWED_MIME_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
}


def validate_file_extension(filename: str) -> bool:
    """
    Validate that a filename has an allowed extension.

    Args:
        filename: Name of the file to validate

    Returns:
        True if extension is allowed, False otherwise
    """
    _, ext = os.path.splitext(filename.lower())
    return ext in ALLOWED_EXTENSIONS


def validate_mime_type(content_type: str) -> bool:
    """
    Validate that a MIME type is allowed.

    Args:
        content_type: MIME type to validate

    Returns:
        True if MIME type is allowed, False otherwise
    """
    return content_type.split(";")[0].strip().lower() in ALLOWED_MIME_TYPES


def validate_file_size(file_size: int, max_file_size: int = None) -> bool:
    """
    Validate that a file size is within limits.

    Args:
        file_size: Size of the file in bytes
        max_file_size: Limit in bytes (defaults to settings.MAX_FILE_SIZE)

    Returns:
        True if size is within limits, False otherwise
    """
    limit = max_file_size if max_file_size is not None else settings.MAX_FILE_SIZE
    return 0 < file_size <= limit


def get_file_size(file: UploadFile) -> int:
    """Measure an uploaded file without consuming it."""
    file.file.seek(0, 2)  # Seek to end
    file_size = file.file.tell()
    file.file.seek(0)  # Reset to beginning
    return file_size


async def validate_upload_file(file: UploadFile, max_file_size: int = None) -> UploadedDocumentDescriptor:
    """
    Validate an uploaded file.

    Args:
        file: FastAPI UploadFile object
        max_file_size: Limit in bytes (defaults to settings.MAX_FILE_SIZE)

    Returns:
        Descriptor of the accepted file

    Raises:
        HTTPException: If file validation fails
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No filename provided"
        )

    if not validate_file_extension(file.filename):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    if not file.content_type or not validate_mime_type(file.content_type):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed MIME types: {', '.join(sorted(ALLOWED_MIME_TYPES))}"
        )

    file_size = get_file_size(file)

    if file_size == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File is empty: {file.filename}"
        )

    if not validate_file_size(file_size, max_file_size):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File size too large"
        )

    return UploadedDocumentDescriptor(
        filename=file.filename,
        mimetype=file.content_type,
        size=file_size
    )


async def validate_upload_files(
    files: Sequence[UploadFile],
    max_files: int = None,
    max_file_size: int = None
) -> List[UploadedDocumentDescriptor]:
    """
    Validate every file attached to a request.

    Args:
        files: Uploaded files
        max_files: Maximum number of files (defaults to settings.MAX_UPLOAD_FILES)
        max_file_size: Per-file limit in bytes

    Returns:
        Descriptors in upload order

    Raises:
        HTTPException: If there are too many files or any file is rejected
    """
    limit = max_files if max_files is not None else settings.MAX_UPLOAD_FILES
    if len(files) > limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Too many files. Maximum: {limit}"
        )

    return [await validate_upload_file(file, max_file_size) for file in files]
