"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, DecodeError, TrackerConnectorError, TransportError
from app.connectors.clickup_connector import ClickUpConnector

__all__ = [
    "BaseConnector",
    "ClickUpConnector",
    "DecodeError",
    "TrackerConnectorError",
    "TransportError",
]
