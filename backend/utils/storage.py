# utils/storage.py
import shutil
import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile

from config import settings

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}

def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path

# Save an uploaded menu, category or logo image and return its public path
def save_image(file: UploadFile) -> str:
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type")

    ext = (file.filename or "").rsplit(".", 1)[-1].lower() if "." in (file.filename or "") else "bin"
    unique_filename = f"{uuid.uuid4().hex}.{ext}"
    save_path = upload_dir() / unique_filename
    try:
        with open(save_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"File save error: {e}")
    finally:
        file.file.close()
    return f"/uploads/{unique_filename}"
