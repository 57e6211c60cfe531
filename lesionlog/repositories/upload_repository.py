# lesionlog/repositories/upload_repository.py
import os
import uuid

class UploadRepository:
    def __init__(self, upload_dir):
        self.upload_dir = upload_dir

    def save_file(self, file, filename):
        if not os.path.exists(self.upload_dir):
            os.makedirs(self.upload_dir)

        # Generated name, original extension kept
        extension = os.path.splitext(filename)[1].lower()
        unique_filename = f"{uuid.uuid4().hex}{extension}"
        file_path = os.path.join(self.upload_dir, unique_filename)

        file.save(file_path)
        return unique_filename, file_path
