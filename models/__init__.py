"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .credential import Credential  # noqa: E402,F401
from .session import Session  # noqa: E402,F401
from .chat_message import ChatMessage  # noqa: E402,F401
from .scrapper import DistributionLog, ScrapperData, ScrapperSettings  # noqa: E402,F401
from .sales import SalesData  # noqa: E402,F401

__all__ = [
    "db",
    "User",
    "Credential",
    "Session",
    "ChatMessage",
    "ScrapperData",
    "ScrapperSettings",
    "DistributionLog",
    "SalesData",
]
