# lesionlog/services/upload_service.py
import os
from flask import current_app
from werkzeug.utils import secure_filename
from ..repositories.upload_repository import UploadRepository
from ..utils.exceptions import ValidationError
from ..utils.logger import setup_logger

class UploadService:
    def __init__(self):
        self.repository = UploadRepository(current_app.config['UPLOAD_DIR'])
        self.logger = setup_logger()

    def upload_image(self, file):
        """Service: Store an uploaded image under a generated unique name"""
        if file is None or not file.filename:
            raise ValidationError("No image file provided")
        if not (file.mimetype or '').startswith('image/'):
            raise ValidationError("Only image files are allowed!")

        filename = secure_filename(file.filename)
        stored_name, path = self.repository.save_file(file, filename)
        size = os.path.getsize(path)
        self.logger.info(f"Service: Stored image {filename} as {stored_name} ({size} bytes)")
        return {
            "filename": stored_name,
            "path": path,
            "size": size,
            "mimetype": file.mimetype
        }
