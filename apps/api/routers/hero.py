"""Hero image router."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel

from routers.master_password import require_master_password
from routers.rate_limit import rate_limit
from services import hero_image

router = APIRouter()


class HeroImageResponse(BaseModel):
    src: str
    caption: Optional[str] = None


class UpdateCaptionRequest(BaseModel):
    caption: Optional[str] = None


@router.get("/", response_model=HeroImageResponse)
async def get_hero_image():
    return HeroImageResponse(**hero_image.get_hero_image())


@router.post("/", response_model=HeroImageResponse)
async def upload_hero_image(
    file: UploadFile = File(...),
    caption: Optional[str] = Form(default=None),
    _auth: None = Depends(require_master_password),
    _rate_limit: None = Depends(rate_limit("hero_upload", limit=20, window_seconds=600)),
):
    return HeroImageResponse(**await hero_image.upload_hero_image(file, caption))


@router.put("/caption", response_model=HeroImageResponse)
async def update_caption(
    request: UpdateCaptionRequest,
    _auth: None = Depends(require_master_password),
):
    return HeroImageResponse(**hero_image.update_caption(request.caption))
