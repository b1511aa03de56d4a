from supabase import Client
from app.modules.uploads.schemas import UploadResponse, UploadFailure
from app.modules.svgs.models import SVGS_TABLE, SVG_CONTENT_TYPE
from app.modules.svgs.schemas import SVGResponse
from app.modules.svgs.storage import SVGStorage
from app.core.dependencies import check_project_owner
from app.core.formatting import normalize_tags
from app.core.query_cache import query_cache
from app.core.session import SessionContext
from app.config import settings
from starlette.concurrency import run_in_threadpool
from typing import List, Optional, Tuple, Union
from fastapi import HTTPException, UploadFile
import asyncio
import uuid
import logging

logger = logging.getLogger(__name__)


def is_svg_file(filename: Optional[str], content_type: Optional[str]) -> bool:
    return content_type == SVG_CONTENT_TYPE or (filename or "").lower().endswith(".svg")


class UploadService:
    def __init__(self, supabase: Client, session: SessionContext, storage: Optional[SVGStorage] = None):
        self.supabase = supabase
        self.session = session
        self.storage = storage or SVGStorage(supabase)

    def _store(
        self,
        filename: str,
        content: bytes,
        project_id: str,
        tags: Optional[List[str]],
        description: Optional[str]
    ) -> SVGResponse:
        """Blob first, then the metadata row. A failed insert removes the blob again."""
        user_id = self.session.user_id
        file_path = self.storage.upload(f"{user_id}/{uuid.uuid4().hex}.svg", content)
        try:
            result = self.supabase.table(SVGS_TABLE).insert({
                "user_id": user_id,
                "project_id": project_id,
                "name": filename,
                "description": description,
                "file_path": file_path,
                "file_size": len(content),
                "tags": tags,
            }).execute()
            if not result.data:
                raise RuntimeError("insert returned no row")
        except Exception:
            self.storage.remove(file_path)
            raise
        logger.info(f"Uploaded {filename} to {file_path}")
        return SVGResponse(**result.data[0])

    async def _upload_one(
        self,
        filename: str,
        content: bytes,
        project_id: str,
        tags: Optional[List[str]],
        description: Optional[str]
    ) -> Union[SVGResponse, UploadFailure]:
        try:
            return await run_in_threadpool(self._store, filename, content, project_id, tags, description)
        except Exception as e:
            logger.error(f"Upload of {filename} failed: {e}")
            return UploadFailure(filename=filename, error="Upload failed")

    async def upload_svgs(
        self,
        files: List[UploadFile],
        project_id: str,
        tags: Union[str, List[str], None] = None,
        description: Optional[str] = None
    ) -> UploadResponse:
        """Upload SVG files into one of the caller's projects. Every file is stored concurrently."""
        accepted = [f for f in files if is_svg_file(f.filename, f.content_type)]
        failed = [
            UploadFailure(filename=f.filename or "", error="Not an SVG file")
            for f in files if f not in accepted
        ]
        if not accepted:
            raise HTTPException(status_code=400, detail="Please upload only SVG files.")

        check_project_owner(project_id, self.session, self.supabase)
        tag_list = normalize_tags(tags)
        description = description or None

        pending: List[Tuple[str, bytes]] = []
        limit_mb = settings.max_svg_size_bytes / (1024 * 1024)
        for file in accepted:
            content = await file.read()
            filename = file.filename or "untitled.svg"
            if len(content) > settings.max_svg_size_bytes:
                failed.append(UploadFailure(filename=filename, error=f"File is larger than {limit_mb:g}MB"))
            elif not content:
                failed.append(UploadFailure(filename=filename, error="File is empty"))
            else:
                pending.append((filename, content))

        if not pending:
            raise HTTPException(
                status_code=400,
                detail={
                    "message": "No valid SVG files to upload",
                    "failed": [f.model_dump() for f in failed],
                }
            )

        results = await asyncio.gather(*[
            self._upload_one(filename, content, project_id, tag_list, description)
            for filename, content in pending
        ])
        uploaded = [r for r in results if isinstance(r, SVGResponse)]
        failed.extend(r for r in results if isinstance(r, UploadFailure))

        if uploaded:
            query_cache.apply_mutation("svg.create")
        else:
            raise HTTPException(
                status_code=502,
                detail={
                    "message": "Upload failed",
                    "failed": [f.model_dump() for f in failed],
                }
            )
        return UploadResponse(
            uploaded=uploaded,
            failed=failed,
            message=f"{len(uploaded)} file(s) uploaded successfully!",
        )
