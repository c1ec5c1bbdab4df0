from collections.abc import Sequence

from pactweb.services.backend_client import UploadPart

ALLOWED_MEDIA_TYPES = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "video/mp4",
    "video/quicktime",
)
IMAGE_MAX_MB = 10
VIDEO_MAX_MB = 100
UNSUPPORTED_TYPE_MESSAGE = "Unsupported file type. Allowed: jpeg, png, webp, mp4, mov."


def validate_uploads(parts: Sequence[UploadPart]) -> str | None:
    """Return the first problem with the selected files, or None when all are acceptable."""
    for part in parts:
        if part.content_type not in ALLOWED_MEDIA_TYPES:
            return UNSUPPORTED_TYPE_MESSAGE
        size_mb = len(part.content) / (1024 * 1024)
        limit = IMAGE_MAX_MB if part.content_type.startswith("image/") else VIDEO_MAX_MB
        if size_mb > limit:
            return f"File {part.filename} is too large. Max {limit} MB."
    return None
