from fastapi import APIRouter
from reportdesk.api.v1 import reports, weekly_reviews, accuracy

api_router = APIRouter()

api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(weekly_reviews.router, prefix="/weekly-reviews", tags=["weekly-reviews"])
api_router.include_router(accuracy.router, prefix="/accuracy", tags=["accuracy"])
