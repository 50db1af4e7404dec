import argparse
import os
from collections.abc import Sequence
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from otf_level.services.identity import available_port, generate_id, generate_name

ENV_PREFIX = "OTF_LEVEL_SRVC_"
# prefix read by earlier deployments of the service
LEGACY_ENV_PREFIX = "OTF_ALIGN_SRVC_"


def _config_file_path(init_kwargs: dict) -> str | None:
    path = init_kwargs.get("config") or os.getenv(f"{ENV_PREFIX}CONFIG") or os.getenv(f"{LEGACY_ENV_PREFIX}CONFIG")
    if not path:
        return None
    if not Path(path).expanduser().is_file():
        raise ValueError(f"cannot read config file {path}")
    return path


class ServiceSettings(BaseSettings):
    """Instance settings: flags > OTF_LEVEL_SRVC_* > OTF_ALIGN_SRVC_* > json config file > defaults."""

    config: str | None = None
    name: str = ""
    id: str = ""
    host: str = "localhost"
    port: int = 0
    niasHost: str = "localhost"
    niasPort: int = 1323
    niasToken: str = ""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_ignore_empty=True, extra="ignore", frozen=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        init_kwargs = getattr(init_settings, "init_kwargs", {})
        return (
            init_settings,
            env_settings,
            EnvSettingsSource(settings_cls, env_prefix=LEGACY_ENV_PREFIX, env_ignore_empty=True),
            JsonConfigSettingsSource(settings_cls, json_file=_config_file_path(init_kwargs)),
        )

    @field_validator("name")
    @classmethod
    def _default_name(cls, value: str) -> str:
        return value.strip() or generate_name()

    @field_validator("id")
    @classmethod
    def _default_id(cls, value: str) -> str:
        return value.strip() or generate_id()

    @field_validator("port")
    @classmethod
    def _default_port(cls, value: int) -> int:
        return value or available_port()

    @property
    def nias_url(self) -> str:
        return f"http://{self.niasHost}:{self.niasPort}/n3/graphql"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="otf-level", description="Run the otf-level scaled score service.")
    parser.add_argument("--config", default=None, help="config file (optional), json format.")
    parser.add_argument("--name", default=None, help="name for this level service instance")
    parser.add_argument(
        "--id",
        default=None,
        help="id for this level service instance, leave blank to auto-generate a unique id",
    )
    parser.add_argument("--host", default=None, help="name/address of host for this service")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="port to run service on, if not specified will assign an available port automatically",
    )
    parser.add_argument("--niasHost", default=None, help="host name/address of nias3 (n3w) web service")
    parser.add_argument("--niasPort", type=int, default=None, help="port that nias3 web (n3w) service is running on")
    parser.add_argument("--niasToken", default=None, help="access token for nias server when making queries")
    return parser


def load_settings(argv: Sequence[str] | None = None) -> ServiceSettings:
    args = build_parser().parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    return ServiceSettings(**overrides)


def describe_settings(settings: ServiceSettings) -> str:
    # only the signature segment of the jwt is shown
    partial_token = settings.niasToken.split(".")[-1]
    lines = [
        "",
        "\tOTF-Level Service Configuration",
        "\t---------------------------------",
        "",
        f"\tservice name:\t\t {settings.name}",
        f"\tservice ID:\t\t {settings.id}",
        f"\tservice host:\t\t {settings.host}",
        f"\tservice port:\t\t {settings.port}",
        f"\tnias n3w host:\t\t {settings.niasHost}",
        f"\tnias n3w port:\t\t {settings.niasPort}",
        f"\tn3w token(partial):\t {partial_token}",
        "",
    ]
    return "\n".join(lines)
