"""Sisi admin: lawan bicara tetap di live chat mitra. Diakses dengan X-Admin-Secret."""
from fastapi import APIRouter

from smartcare.admin.routers import chat

admin_router = APIRouter(prefix="/admin", tags=["admin"])

admin_router.include_router(chat.router, prefix="/chat", tags=["admin-chat"])
