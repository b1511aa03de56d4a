from pydantic import BaseModel
from typing import List
from app.modules.svgs.schemas import SVGResponse


class UploadFailure(BaseModel):
    filename: str
    error: str


class UploadResponse(BaseModel):
    uploaded: List[SVGResponse]
    failed: List[UploadFailure]
    message: str
