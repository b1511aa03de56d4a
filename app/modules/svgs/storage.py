"""SVG blob storage: S3 when configured, otherwise the Supabase svg-files bucket."""
from supabase import Client
from app.config import settings
from app.modules.svgs.models import SVG_CONTENT_TYPE
from app.modules.svgs.s3_storage import S3Storage
import logging

logger = logging.getLogger(__name__)


class SVGStorage:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.bucket_name = settings.svg_bucket
        self.s3_storage = None
        if settings.s3_configured:
            try:
                self.s3_storage = S3Storage()
            except Exception as e:
                logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
                self.s3_storage = None

    def upload(self, key: str, content: bytes) -> str:
        """Store content under key and return the file_path to record on the svgs row"""
        if self.s3_storage:
            return self.s3_storage.upload_file(content, key)
        self.supabase.storage.from_(self.bucket_name).upload(
            key,
            content,
            file_options={"content-type": SVG_CONTENT_TYPE}
        )
        return key

    def download(self, file_path: str) -> bytes:
        if file_path.startswith("s3://"):
            if not self.s3_storage:
                raise RuntimeError(f"S3 is not configured, cannot read {file_path}")
            return self.s3_storage.download_file(self.s3_storage.key_from_uri(file_path))
        return self.supabase.storage.from_(self.bucket_name).download(file_path)

    def remove(self, file_path: str) -> bool:
        try:
            if file_path.startswith("s3://"):
                if not self.s3_storage:
                    return False
                return self.s3_storage.delete_file(self.s3_storage.key_from_uri(file_path))
            self.supabase.storage.from_(self.bucket_name).remove([file_path])
            return True
        except Exception as e:
            logger.warning(f"Failed to remove blob {file_path}: {e}")
            return False
