"""
Process configuration for the box catalog server.

Settings come from environment variables. The root directory may also be
given as the positional ROOT_PATH of ``box-catalog``.

* ``BOX_CATALOG_ROOT``  - directory holding ``*.metadata.json`` files and the
  artifacts they reference (required)
* ``PREFIX``            - namespace prepended to every box name (default "bento")
* ``PORT``              - listening port (default 8000)
* ``BOX_CATALOG_HOST``  - listening address (default "0.0.0.0")
* ``BOX_CATALOG_MOUNT`` - path the boxes API is mounted under (default "/boxes")
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from box_catalog.domain.errors import ConfigurationError


ROOT_ENV_VAR = "BOX_CATALOG_ROOT"
PREFIX_ENV_VAR = "PREFIX"
PORT_ENV_VAR = "PORT"
HOST_ENV_VAR = "BOX_CATALOG_HOST"
MOUNT_ENV_VAR = "BOX_CATALOG_MOUNT"


class ServerSettings(BaseModel):
    """
    Plain configuration values consumed by the application factory.
    """

    root: Path = Field(
        description="Document root containing description files and box artifacts.",
    )
    prefix: str = Field(
        default="bento",
        description="Namespace prepended to every logical box name.",
    )
    port: int = Field(default=8000, ge=1, le=65535)
    host: str = Field(default="0.0.0.0")
    mount_path: str = Field(
        default="/boxes",
        description="URL path the boxes API is mounted under.",
    )

    @field_validator("root")
    @classmethod
    def _root_must_exist(cls, value: Path) -> Path:
        value = value.expanduser()
        if not value.is_dir():
            raise ValueError(f"ROOT_PATH: {value} must exist!")
        return value

    @field_validator("mount_path")
    @classmethod
    def _normalise_mount_path(cls, value: str) -> str:
        value = "/" + value.strip("/")
        if value == "/":
            raise ValueError("mount_path must not be the document root")
        return value


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    root: Optional[str] = None,
) -> ServerSettings:
    """
    Build ServerSettings from the environment (``os.environ`` by default).

    An explicit ``root`` (the positional ROOT_PATH of ``box-catalog``) takes
    precedence over ``BOX_CATALOG_ROOT``.
    """
    env = os.environ if environ is None else environ

    root = root or env.get(ROOT_ENV_VAR)
    if not root:
        raise ConfigurationError(f"{ROOT_ENV_VAR} must point at the box directory")

    values = {"root": Path(root)}
    for key, env_var in (
        ("prefix", PREFIX_ENV_VAR),
        ("port", PORT_ENV_VAR),
        ("host", HOST_ENV_VAR),
        ("mount_path", MOUNT_ENV_VAR),
    ):
        if env.get(env_var):
            values[key] = env[env_var]

    try:
        return ServerSettings(**values)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
