"""RefnetSettings: CLI flags, env vars, and ``refnet.toml`` merged into one object.

Precedence, highest first:

1. keyword arguments (the CLI flags Click collected)
2. ``REFNET_*`` env vars, ``__`` for nesting (``REFNET_ANALYSIS__DEFAULT_TOP=5``)
3. the TOML file chosen by :mod:`refnet.config.discovery`
4. defaults in :mod:`refnet.config.models`
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from refnet.config.discovery import find_config, read_toml
from refnet.config.models import (
    AnalysisConfig,
    NetworkConfig,
    OptimizerConfig,
    SimulationConfig,
)

# pydantic-settings builds sources inside __init__, so the file chosen by
# from_cli() travels to settings_customise_sources() through this slot.
_pending = threading.local()


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one parsed TOML file (empty if there is none)."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = (
            read_toml(toml_path) if toml_path and toml_path.is_file() else {}
        )

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class RefnetSettings(BaseSettings):
    """Frozen runtime settings shared by every command.

    Attributes:
        project_root: Base for relative ``[network] path`` values; the
            directory holding ``refnet.toml``, or the CWD without one.
        config_path: The TOML file that was read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "REFNET_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_source = TomlSettingsSource(settings_cls, getattr(_pending, "toml_path", None))
        return init_settings, env_settings, toml_source

    @property
    def network_file(self) -> Path | None:
        """``[network] path`` as an absolute-or-root-relative path, or None."""
        if not self.network.path:
            return None
        path = Path(self.network.path).expanduser()
        return path if path.is_absolute() else self.project_root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        network_path: str | None = None,
        **cli_flags: Any,
    ) -> RefnetSettings:
        """Build settings for one CLI invocation.

        Args:
            config_path: Explicit ``--config`` file; skips discovery. A path
                that does not exist means no TOML file.
            project_root: Start of the config walk-up and the base for
                relative network paths. Defaults to the config file's
                directory, else the CWD.
            network_path: ``--network`` value; resolved against the CWD and
                replaces ``[network] path``.
            **cli_flags: Top-level fields such as ``json_output``.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path else Path.cwd()

        _pending.toml_path = toml_path
        try:
            settings = cls(project_root=project_root, config_path=toml_path, **cli_flags)
        finally:
            _pending.toml_path = None

        if not network_path:
            return settings
        resolved = str(Path(network_path).expanduser().resolve())
        network = settings.network.model_copy(update={"path": resolved})
        return settings.model_copy(update={"network": network})
