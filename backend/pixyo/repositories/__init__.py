from pixyo.repositories.design import AssetRepository, DesignRepository
from pixyo.repositories.profile import ProfileRepository
from pixyo.repositories.usage import GenerationLogRepository, UsageLogRepository
from pixyo.repositories.waitlist import WaitlistRepository

__all__ = [
    "AssetRepository",
    "DesignRepository",
    "GenerationLogRepository",
    "ProfileRepository",
    "UsageLogRepository",
    "WaitlistRepository",
]
