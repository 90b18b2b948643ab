from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# SQLite only auto-increments an "INTEGER PRIMARY KEY" column, so the
# BIGINT primary keys used on PostgreSQL fall back to INTEGER there.
IdType = BigInteger().with_variant(Integer, "sqlite")
