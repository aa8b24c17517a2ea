[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "portalapi"
version = "0.1.0"
description = "HTTP backend for a projects portal: admin-only invite management behind JWT-checked routes, backed by PostgreSQL."
requires-python = ">=3.10"
keywords = ["flask", "jwt", "invites", "rest", "api", "portal", "sqlalchemy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.3",
    "sqlalchemy>=2.0",
    "pyjwt>=2.8",
    "redis>=5.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
portalapi = "portalapi.app:main"

[tool.hatch.build.targets.wheel]
packages = ["portalapi"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
