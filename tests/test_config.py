from unittest import mock

import pytest
from sqlalchemy import create_engine, text

from portalapi.config import connect_database, connect_redis, database_dsn

DB_ENV = {
    "DB_HOST": "db.example.com",
    "DB_PORT": "5432",
    "DB_USER": "user",
    "DB_PASSWORD": "password",
    "DB_NAME": "portal",
    "DB_SSLMODE": "disable",
}


def test_database_dsn_format():
    assert database_dsn(DB_ENV) == (
        "host=db.example.com port=5432 user=user password=password "
        "dbname=portal sslmode=disable"
    )


def test_database_dsn_missing_values_are_empty():
    assert database_dsn({}) == "host= port= user= password= dbname= sslmode="


def test_connect_database_uses_dsn_and_checks_connection():
    engine = create_engine("sqlite://")
    with mock.patch("portalapi.config.create_engine", return_value=engine) as fake:
        session = connect_database(DB_ENV)
    fake.assert_called_once_with(
        "postgresql+psycopg2://", connect_args={"dsn": database_dsn(DB_ENV)}
    )
    assert session.bind is engine
    assert session.execute(text("select 1")).scalar() == 1


def test_connect_redis_from_env():
    client = connect_redis({"REDIS_ADDR": "cache.example.com:6380", "REDIS_PASSWORD": "password"})
    kwargs = client.connection_pool.connection_kwargs
    assert kwargs["host"] == "cache.example.com"
    assert kwargs["port"] == 6380
    assert kwargs["password"] == "password"
    assert kwargs["db"] == 0


def test_connect_redis_defaults():
    kwargs = connect_redis({}).connection_pool.connection_kwargs
    assert kwargs["host"] == "localhost"
    assert kwargs["port"] == 6379
    assert kwargs["password"] is None


def test_connect_redis_rejects_bad_port():
    with pytest.raises(ValueError):
        connect_redis({"REDIS_ADDR": "cache.example.com:port"})