"""
API Utility Functions
Upload handling for the studio API
"""

import mimetypes
from typing import Tuple

from bananastudio.images import ImageHandle

# Allowed file extensions for uploads
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'bmp', 'tiff', 'webp'}

DOWNLOAD_FILENAME = 'bananastudio-render.png'


def allowed_file(filename: str) -> bool:
    """
    Check if file extension is allowed for uploads

    Args:
        filename: Name of the file to check

    Returns:
        bool: True if file type is allowed
    """
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def format_file_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def validate_image_file(file) -> Tuple[bool, str]:
    """
    Validate uploaded image file

    Args:
        file: Uploaded werkzeug FileStorage

    Returns:
        tuple: (is_valid, error_message)
    """
    if not file or not file.filename:
        return False, "No file provided"

    if not allowed_file(file.filename):
        return False, f"Invalid file type. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"

    file.stream.seek(0, 2)  # Seek to end
    file_size = file.stream.tell()
    file.stream.seek(0)

    if file_size == 0:
        return False, "Empty file provided"

    return True, ""


def read_upload(file) -> ImageHandle:
    """Read an uploaded file fully into memory."""
    mime_type = file.mimetype if file.mimetype and file.mimetype.startswith('image/') else None
    if not mime_type:
        mime_type = mimetypes.guess_type(file.filename)[0] or 'image/png'
    data = file.read()
    print(f"📥 Received {file.filename} ({format_file_size(len(data))}, {mime_type})")
    return ImageHandle(data=data, mime_type=mime_type)
