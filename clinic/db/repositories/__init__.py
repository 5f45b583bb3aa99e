# clinic/db/repositories/__init__.py
from .base_repository import Repository

__all__ = ["Repository"]
