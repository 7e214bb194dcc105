from pixyo.db.models.design import Asset, Design
from pixyo.db.models.profile import Profile
from pixyo.db.models.usage import GenerationLog, UsageLog
from pixyo.db.models.waitlist import WaitlistEntry

__all__ = [
    "Asset",
    "Design",
    "GenerationLog",
    "Profile",
    "UsageLog",
    "WaitlistEntry",
]
