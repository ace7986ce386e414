"""
SQLAlchemy database models for Orpheus.
"""

from orpheus_common.models.base import Base
from orpheus_common.models.content import Background, Essay, Paper, Photo
from orpheus_common.models.setting import SiteSetting
from orpheus_common.models.user import Role, User

__all__ = [
    "Base",
    "Background",
    "Essay",
    "Paper",
    "Photo",
    "Role",
    "SiteSetting",
    "User",
]
