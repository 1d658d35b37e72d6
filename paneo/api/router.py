"""Aggregate all API sub-routers."""

from fastapi import APIRouter

from . import fs, copy, move

api_router = APIRouter()

api_router.include_router(fs.router)
api_router.include_router(copy.router)
api_router.include_router(move.router)
