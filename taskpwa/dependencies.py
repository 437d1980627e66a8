"""FastAPI dependencies."""
from fastapi import Request

from taskpwa.config import Settings
from taskpwa.services.push_registry import PushRegistry
from taskpwa.services.task_registry import TaskRegistry


def get_registry(request: Request) -> TaskRegistry:
    """Task registry owned by the running application."""
    return request.app.state.registry


def get_push_registry(request: Request) -> PushRegistry:
    """Push subscription registry owned by the running application."""
    return request.app.state.push_registry


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
