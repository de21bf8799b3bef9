"""Service modules"""
from .accounts import AccountDirectory, check_public_key
from .balance import BalanceResolver
from .deploys import DeployInfoPager
from .search import SearchService, SearchValidationError, Target

__all__ = [
    "AccountDirectory",
    "BalanceResolver",
    "DeployInfoPager",
    "SearchService",
    "SearchValidationError",
    "Target",
    "check_public_key",
]
