from fastapi import APIRouter

from .posts import router as posts_router
from .uploads import router as uploads_router

api_router = APIRouter()
api_router.include_router(posts_router, prefix="/posts", tags=["posts"])
api_router.include_router(uploads_router, prefix="/upload", tags=["uploads"])
