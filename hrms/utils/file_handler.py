import uuid
import aiofiles
from pathlib import Path
from fastapi import UploadFile
from PIL import Image
import logging

from hrms.core.config import settings
from hrms.core.exceptions import BaseAppException, ValidationError

logger = logging.getLogger(__name__)

class FileUploadService:
    """Stores profile photos on disk and hands back the public path"""

    def __init__(self, upload_dir: str = None):
        self.upload_dir = Path(upload_dir or settings.UPLOAD_PATH)
        self.allowed_image_types = {"image/jpeg", "image/jpg", "image/png", "image/gif"}
        self.image_extensions = {".jpg", ".jpeg", ".png", ".gif"}
        self.max_image_size = settings.MAX_PHOTO_SIZE

    def validate_image(self, file: UploadFile) -> int:
        if not file.filename:
            raise ValidationError("No file uploaded")

        extension = Path(file.filename).suffix.lower()
        if file.content_type not in self.allowed_image_types or extension not in self.image_extensions:
            raise ValidationError("Only image files (JPEG, PNG, GIF) are allowed")

        file.file.seek(0, 2)
        file_size = file.file.tell()
        file.file.seek(0)

        if file_size > self.max_image_size:
            raise ValidationError(f"Image size too large. Max: {self.max_image_size // (1024 * 1024)}MB")
        return file_size

    async def save_profile_photo(self, file: UploadFile, user_id: int) -> str:
        self.validate_image(file)

        extension = Path(file.filename).suffix.lower()
        unique_filename = f"profile-{user_id}-{uuid.uuid4().hex[:8]}{extension}"
        subdirectory = "images/profile-photos"
        file_path = self.upload_dir / subdirectory / unique_filename
        file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            content = await file.read()
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
            self._verify_image(file_path)
        except ValidationError:
            file_path.unlink(missing_ok=True)
            raise
        except Exception as e:
            logger.error(f"Error saving profile photo for user {user_id}: {e}")
            file_path.unlink(missing_ok=True)
            raise BaseAppException(500, "Failed to save file")

        logger.info(f"Profile photo saved for user {user_id}: {unique_filename}")
        return f"/uploads/{subdirectory}/{unique_filename}"

    @staticmethod
    def _verify_image(file_path: Path):
        """Reject uploads whose bytes are not a readable image"""
        try:
            with Image.open(file_path) as img:
                img.verify()
        except Exception:
            raise ValidationError("Uploaded file is not a valid image")

    def delete_file(self, file_path: str) -> bool:
        if not file_path or not file_path.startswith("/uploads/"):
            return False
        full_path = self.upload_dir / file_path[len("/uploads/"):]
        if full_path.is_file():
            full_path.unlink()
            logger.info(f"Deleted file: {file_path}")
            return True
        return False
