# portalapi

The HTTP backend for a projects portal. It is a small JSON API built on Flask,
with its data in PostgreSQL through SQLAlchemy. It manages invites, and only
callers that present a JWT access token with the `admin` role can use those
routes.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

The database connection uses SQLAlchemy's `postgresql` dialect. Its default
driver, `psycopg2`, is not installed with the package, so install it
separately.

## Configuration

Settings come from environment variables. At start-up, a `.env` file in the
working directory is loaded if there is one.

| Variable         | Meaning                                                        |
|------------------|----------------------------------------------------------------|
| `DB_HOST`        | PostgreSQL host                                                |
| `DB_PORT`        | PostgreSQL port                                                |
| `DB_USER`        | PostgreSQL user                                                |
| `DB_PASSWORD`    | PostgreSQL password                                            |
| `DB_NAME`        | Database name                                                  |
| `DB_SSLMODE`     | SSL mode passed to the driver, for example `disable`           |
| `REDIS_ADDR`     | Redis address as `host:port` (default `localhost:6379`)        |
| `REDIS_PASSWORD` | Redis password (may be empty)                                  |
| `JWT_SECRET`     | HMAC key used to verify access tokens                          |
| `APP_ENV`        | `production` gives JSON log lines at INFO level; any other value gives readable lines at DEBUG level |
| `PORT`           | Port to listen on (default `8080`)                             |

An example `.env`:

```
DB_HOST=localhost
DB_PORT=5432
DB_USER=user
DB_PASSWORD=password
DB_NAME=portal
DB_SSLMODE=disable
REDIS_ADDR=localhost:6379
REDIS_PASSWORD=password
JWT_SECRET=secret
APP_ENV=development
PORT=8080
```

## Running

```
portalapi
```

At start-up the command:

1. opens a connection to PostgreSQL,
2. pings Redis, and
3. serves the app with Flask's built-in server on `0.0.0.0` and `PORT`.

If the database or Redis cannot be reached, it logs the error and exits with
status 1. Each request is logged with its URI and response status.

The server does not create the database tables. To create them from the
models, call `portalapi.models.Base.metadata.create_all(engine)`.

## API

`GET /` returns `Server is up and running!` as plain text.

### Invites

Every route under `/invites` checks the `Authorization` header. The header must
be two parts separated by one space, such as `Bearer token`. The second part
must be a JWT signed with `JWT_SECRET` using HS256, HS384 or HS512. If the token
has an expiry, the token must not be past it.

- A missing or invalid token gets `401` with `{"error": "invalid access token"}`.
- A token whose `role` claim is not `admin` gets `401` with
  `{"error": "insufficient role permissions", "role": ...}`.
- The token's `user_id` claim must be a UUID. It is recorded as the invite's
  creator.

The routes:

- `POST /invites` takes the body `{"email": "someone@example.com", "role": "member"}`.
  It creates an invite with a fresh random token that expires 48 hours later.
  The response is `201` with `id`, `token`, `role` and `expires_at`, where
  `expires_at` is a Unix timestamp. A body that is not a JSON object of strings
  gets `400` with `{"error": "bad body parameters"}`. A database error gets
  `500`.
- `GET /invites` returns `200` with `{"invites": [...]}`. Each invite has the
  fields `ID`, `Email`, `Role`, `Token`, `ExpiresAt`, `Used`, `CreatedBy`,
  `CreatedAt` and `UpdatedAt`.
- `DELETE /invites/<id>` removes the invite with that UUID and returns `204`.
  A database error gets `400`.

## Using it as a library

`portalapi.app.create_app(session, logger)` builds the Flask application around
an existing SQLAlchemy `Session` and a `logging.Logger`. This is useful in tests
and when embedding the API.

The other modules can also be used on their own:

- `portalapi.config`:
  - `database_dsn(env)` builds the connection string.
  - `connect_database(env)` opens a checked session.
  - `connect_redis(env)` builds a Redis client.

  Each takes a mapping, and falls back to `os.environ` when none is given.
- `portalapi.logs.init_logger(env)` configures the `portalapi` logger.
- `portalapi.models` holds the SQLAlchemy tables: `User`, `Role`, `UserRole`,
  `Invite`, `Project`, `ProjectMember`, `Milestone`, `Task`, `Notification`
  and `ActivityLog`. It also holds the token claim classes
  `AccessTokenClaims`, `RefreshTokenClaims` and `UserRefreshToken`.
- `portalapi.repository`:
  - `AuthRepo` handles users and their roles.
  - `InviteRepo` handles stored invites.
  - A lookup that finds nothing raises `RecordNotFound`.
- `portalapi.invites.InviteService`:
  - `create_invite` stores a new invite.
  - `get_invites` and `delete_invite` list and remove invites.
  - `validate_invite_token(email, token)` returns the invite's role. It raises
    `InviteError` if the invite has expired, has been used, or was issued to
    another e-mail address.
  - `use_invite_token(token)` marks an invite as used.
- `portalapi.middleware`:
  - `parse_access_token(header, secret)` returns `AccessTokenClaims`, or raises
    `InvalidAccessToken`.
  - `admin_only` and `logged_in` are decorators for Flask views.

## What it does not do

- The API has no login, registration, token refresh or logout routes.
- Nothing in the package issues access or refresh tokens. Access tokens must be
  made elsewhere and signed with `JWT_SECRET`.
- Invites can be created, listed and deleted. No route lets an invited person
  redeem an invite. `validate_invite_token` and `use_invite_token` exist only
  for library use.
- Redis is only pinged at start-up. Nothing is stored in it.
- The project, milestone, task, notification and activity-log tables have
  models but no routes.

## Tests

```
pytest
```