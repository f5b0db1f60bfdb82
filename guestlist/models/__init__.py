from .base import Base, BaseModel, TenantOwned, TimeStamp

__all__ = [
    "Base",
    "BaseModel",
    "TenantOwned",
    "TimeStamp",
]
