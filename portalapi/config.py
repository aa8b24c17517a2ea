"""Connections to the database and the Redis store, configured from the environment."""

import os
from typing import Mapping, Optional

import redis
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

_DB_KEYS = ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_SSLMODE")


def database_dsn(env: Optional[Mapping[str, str]] = None) -> str:
    """Return the key=value connection string for PostgreSQL."""
    env = os.environ if env is None else env
    values = [env.get(key, "") for key in _DB_KEYS]
    return "host={} port={} user={} password={} dbname={} sslmode={}".format(*values)


def connect_database(env: Optional[Mapping[str, str]] = None) -> Session:
    """Open a PostgreSQL session, checking that the server answers."""
    engine = create_engine("postgresql://", connect_args={"dsn": database_dsn(env)})
    with engine.connect():
        pass
    return Session(engine)


def connect_redis(env: Optional[Mapping[str, str]] = None) -> redis.Redis:
    """Create a Redis client for database 0; no connection is made yet."""
    env = os.environ if env is None else env
    addr = env.get("REDIS_ADDR") or "localhost:6379"
    host, sep, port = addr.rpartition(":")
    if not sep:
        host, port = addr, ""
    return redis.Redis(
        host=host or "localhost",
        port=int(port or 6379),
        password=env.get("REDIS_PASSWORD") or None,
        db=0,
    )