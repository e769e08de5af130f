"""TOML-based provisioning configuration.

Loads ~/.vpclaunch/defaults.toml (global) and vpclaunch.toml (project),
merges them, and resolves the ``[provision]`` table into an immutable
ProvisionConfig that is handed to the orchestrator once per run.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Literal

from vpclaunch.core.exceptions import ConfigurationError

type RawConfig = dict[str, Any]

type ZonePolicy = Literal[
    "exclude-last",  # Reference behaviour: last zone is never drawn
    "uniform",  # Every zone is eligible
]
ZONE_POLICIES: tuple[ZonePolicy, ...] = ("exclude-last", "uniform")

GLOBAL_CONFIG_PATH = Path.home() / ".vpclaunch" / "defaults.toml"
PROJECT_CONFIG_NAME = "vpclaunch.toml"
SECTION = "provision"


@dataclass(frozen=True, slots=True)
class ProvisionConfig:
    """Provisioning configuration.

    Fixed at run start and never reconfigured mid-run. All fields have
    defaults, so ``ProvisionConfig()`` provisions a single t2.micro in
    us-east-2.

    Example:
        >>> from vpclaunch import ProvisionConfig
        >>> config = ProvisionConfig(region="eu-west-1", environment="Prod")

    Args:
        region: Target region for every resource.
        network_cidr: CIDR block of the new network.
        subnet_cidr: CIDR block of the subnet, inside ``network_cidr``.
        security_group_name: Name of the new security group.
        security_group_description: Description of the new security group.
        key_pair_name: Name of the new SSH key pair.
        environment: Value of the ``Environment`` tag on the instance.
        instance_type: Instance type to launch, also written as a tag.
        ami_name_pattern: Image name filter used during image discovery.
        zone_policy: How the subnet zone is drawn from the zone list.
    """

    region: str = "us-east-2"
    network_cidr: str = "10.0.0.0/16"
    subnet_cidr: str = "10.0.1.0/24"
    security_group_name: str = "my-prod-sg-web-01"
    security_group_description: str = "My test SG"
    key_pair_name: str = "my-key-pair"
    environment: str = "Non-Prod"
    instance_type: str = "t2.micro"
    ami_name_pattern: str = "amzn2-ami-hvm-2.0.*"
    zone_policy: ZonePolicy = "exclude-last"

    def __post_init__(self) -> None:
        if self.zone_policy not in ZONE_POLICIES:
            raise ConfigurationError(
                f"Unknown zone_policy '{self.zone_policy}'. Valid: {', '.join(ZONE_POLICIES)}"
            )

    def with_overrides(self, **overrides: Any) -> ProvisionConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
    config_path: Path | None = None,
) -> RawConfig:
    """Read and merge the global and project configuration files.

    An explicit ``config_path`` replaces the project file lookup and must exist.
    """
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)

    if config_path is not None:
        if not config_path.is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")
        project_cfg = _read_toml(config_path)
    else:
        project_cfg = _read_toml((project_dir or Path.cwd()) / PROJECT_CONFIG_NAME)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault(SECTION, {})
    return merged


def _build_config(raw: RawConfig) -> ProvisionConfig:
    known = {f.name for f in fields(ProvisionConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown [{SECTION}] keys: {', '.join(unknown)}. "
            f"Valid: {', '.join(sorted(known))}"
        )
    return ProvisionConfig(**raw)


def resolve_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
    config_path: Path | None = None,
    **overrides: Any,
) -> ProvisionConfig:
    """Build the run's ProvisionConfig from files plus explicit overrides."""
    config = load_config(
        project_dir=project_dir,
        global_path=global_path,
        config_path=config_path,
    )
    raw = config[SECTION]
    if not isinstance(raw, dict):
        raise ConfigurationError(f"[{SECTION}] must be a table")
    return _build_config(raw).with_overrides(**overrides)
