import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename


class MediaRejected(ValueError):
    pass


def media_type_for(mimetype: str) -> str:
    return "video" if (mimetype or "").startswith("video/") else "image"


def save_media(file_storage) -> tuple[str, str]:
    """
    Stores an uploaded campaign file and returns (media_url, media_type).
    Raises MediaRejected for empty or non image/video uploads.
    """
    filename = secure_filename(file_storage.filename or "")
    if not filename:
        raise MediaRejected("mediaFile has no filename")

    mimetype = (file_storage.mimetype or "").lower()
    allowed = current_app.config.get("ALLOWED_MEDIA_PREFIXES", ("image/", "video/"))
    if not mimetype.startswith(tuple(allowed)):
        raise MediaRejected("mediaFile must be an image or a video")

    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)

    stored_name = f"{uuid.uuid4().hex}_{filename}"
    file_storage.save(os.path.join(folder, stored_name))

    prefix = current_app.config.get("MEDIA_URL_PREFIX", "/uploads").rstrip("/")
    return f"{prefix}/{stored_name}", media_type_for(mimetype)
