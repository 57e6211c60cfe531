# lesionlog/api/resources/upload.py
from flask_restful import Resource, request
from ...services.upload_service import UploadService

class UploadImage(Resource):
    def post(self):
        """Controller: Accept one multipart image under the 'image' field"""
        file_data = UploadService().upload_image(request.files.get('image'))
        return {"success": True, "message": "Image uploaded successfully", "fileData": file_data}, 200
