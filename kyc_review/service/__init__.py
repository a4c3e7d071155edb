"""Remote KYC service access and token persistence."""
from kyc_review.service.client import KYCServiceClient
from kyc_review.service.storage import TOKEN_STORAGE_KEY, FileTokenStore, MemoryTokenStore

__all__ = [
    "FileTokenStore",
    "KYCServiceClient",
    "MemoryTokenStore",
    "TOKEN_STORAGE_KEY",
]
