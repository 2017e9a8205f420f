from .base import BaseRepository
from .denormalization import EmbeddedCopySync, embed
from .funding_repository import FundingRepository
from .payback_repository import PaybackPlanRepository, PaybackRepository

__all__ = [
    "BaseRepository",
    "EmbeddedCopySync",
    "embed",
    "FundingRepository",
    "PaybackPlanRepository",
    "PaybackRepository",
]
