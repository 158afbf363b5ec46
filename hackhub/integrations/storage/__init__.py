from .images import UploadResult
from .images import upload_image

__all__ = ["UploadResult", "upload_image"]
