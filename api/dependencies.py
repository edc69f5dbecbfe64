from fastapi import Request

from analytics.service import AnalyticsService
from database.db_manager import DatabaseManager


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    return request.app.state.db_manager


def get_analytics(request: Request) -> AnalyticsService:
    """FastAPI dependency that provides the AnalyticsService."""
    return request.app.state.analytics
