from storefront.db.base import Base
from storefront.db.database import Database, build_engine

__all__ = ["Base", "Database", "build_engine"]
