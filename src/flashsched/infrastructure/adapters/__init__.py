# Infrastructure Adapters Package
from .json_store import JsonCardStore

__all__ = ["JsonCardStore"]
