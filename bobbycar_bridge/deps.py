from fastapi import WebSocket

from .config import Settings
from .services import LineProtocolWriter


def get_settings(websocket: WebSocket) -> Settings:
    return websocket.app.state.settings


def get_writer(websocket: WebSocket) -> LineProtocolWriter:
    """Shared writer created in the application lifespan."""
    return websocket.app.state.writer
