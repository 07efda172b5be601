"""Configuration model and loaders for ttsprep.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide deterministic precedence resolution for provider/model/credential values.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `TtsPrepConfig`: normalized runtime settings for one preparation run.
- `ProviderRuntimeConfig`: resolved provider/model runtime values.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `TtsPrepConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigurationError
from .llm.gateway import DEFAULT_GEMINI_MODEL
from .models.datatypes import CleaningOptions, SplitStrategy
from .parsing import (
    normalize_optional_string,
    parse_optional_page,
    parse_permissive_boolean,
)


DEFAULT_PROVIDER = "gemini"
DEFAULT_TIMEOUT_SECONDS = 600.0
SUPPORTED_PROVIDER_IDS = frozenset({"gemini"})

_OPTION_TOGGLE_KEYS = (
    "remove_headers_footers",
    "remove_page_numbers",
    "normalize_whitespace",
    "linearize_tables",
)


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProviderRuntimeConfig:
    """Resolved runtime provider settings for one run.

    Attributes:
        provider: Provider identifier for the model gateway.
        model: Model identifier.
        timeout_seconds: HTTP timeout for the single model request.
        api_key: Optional provider API key (resolved, never logged or exported).
    """

    provider: str
    model: str
    timeout_seconds: float
    api_key: str | None = None


@dataclass(slots=True)
class TtsPrepConfig:
    """Runtime configuration for one preparation run.

    Attributes:
        input_path: Path to the source document.
        output_dir: Directory receiving exported chapter files.
        options: Cleaning directives and page range.
        split_strategy: Chapter splitting strategy.
        provider: Provider identifier.
        model: Model identifier.
        api_key: Optional API key for provider calls.
        timeout_seconds: HTTP timeout for the model request.
        write_archive: Whether to bundle exported chapters into a zip archive.
        runtime_sources: Optional runtime source overrides injected by CLI.
    """

    input_path: Path
    output_dir: Path = Path("out")
    options: CleaningOptions = field(default_factory=CleaningOptions)
    split_strategy: SplitStrategy = SplitStrategy.AUTO
    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_GEMINI_MODEL
    api_key: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    write_archive: bool = True
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)

    def validate(self) -> None:
        """Validate configuration values before running the pipeline."""

        self.options.validate()
        self.split_strategy = SplitStrategy.parse(self.split_strategy)
        self._validate_provider_id(self.provider)
        if not isinstance(self.model, str) or not self.model.strip():
            raise ConfigurationError("`model` must be a non-empty string.")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("`timeout_seconds` must be a positive number.")

    def resolved_provider_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ProviderRuntimeConfig:
        """Resolve provider settings with deterministic source precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > config field value.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        provider = self._resolve_runtime_value(
            key="provider",
            env_key="TTSPREP_PROVIDER",
            default_value=self.provider,
            sources=resolved_sources,
        )
        model = self._resolve_runtime_value(
            key="model",
            env_key="TTSPREP_MODEL",
            default_value=self.model,
            sources=resolved_sources,
        )
        timeout_text = self._resolve_runtime_value(
            key="timeout_seconds",
            env_key="TTSPREP_TIMEOUT_SECONDS",
            default_value=str(self.timeout_seconds),
            sources=resolved_sources,
        )
        api_key = self._resolve_optional_runtime_value(
            key="api_key",
            env_key="GEMINI_API_KEY",
            default_value=self.api_key,
            sources=resolved_sources,
        )

        self._validate_provider_id(provider)
        return ProviderRuntimeConfig(
            provider=provider,
            model=model,
            timeout_seconds=_parse_positive_float(timeout_text, "timeout_seconds"),
            api_key=api_key,
        )

    def _resolve_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str:
        """Resolve a required runtime value from sources in precedence order."""

        value = self._resolve_optional_runtime_value(key, env_key, default_value, sources)
        if value is None:
            raise ConfigurationError(
                f"`{key}` could not be resolved from CLI, secure storage, env, or defaults."
            )
        return value

    @staticmethod
    def _resolve_optional_runtime_value(
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve an optional runtime value from sources in precedence order."""

        for mapping, lookup_key in (
            (sources.cli, key),
            (sources.secure, key),
            (sources.env, env_key),
        ):
            if lookup_key in mapping:
                value = normalize_optional_string(mapping.get(lookup_key))
                if value is not None:
                    return value
        return normalize_optional_string(default_value)

    @staticmethod
    def _validate_provider_id(provider_id: str) -> None:
        """Validate provider identifiers against supported providers."""

        if provider_id not in SUPPORTED_PROVIDER_IDS:
            supported = ", ".join(sorted(SUPPORTED_PROVIDER_IDS))
            raise ConfigurationError(
                f"Unsupported provider `{provider_id}`; supported: {supported}."
            )


def _parse_positive_float(value: object, field_name: str) -> float:
    """Parse a positive float or raise `ConfigurationError`."""

    if isinstance(value, bool):
        raise ConfigurationError(f"`{field_name}` must be a positive number.")
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"`{field_name}` must be a positive number.") from exc
    if parsed <= 0:
        raise ConfigurationError(f"`{field_name}` must be a positive number.")
    return parsed


class ConfigLoader:
    """Factory methods for creating `TtsPrepConfig` from external sources."""

    _REQUIRED_YAML_KEYS = frozenset({"input_path"})
    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "input_path",
            "output_dir",
            "split_strategy",
            "provider",
            "model",
            "api_key",
            "timeout_seconds",
            "write_archive",
            "options",
        }
    )
    _SUPPORTED_OPTION_KEYS = frozenset({*_OPTION_TOGGLE_KEYS, "start_page", "end_page"})
    _RUNTIME_ENV_KEYS = frozenset(
        {
            "TTSPREP_PROVIDER",
            "TTSPREP_MODEL",
            "TTSPREP_TIMEOUT_SECONDS",
            "GEMINI_API_KEY",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> TtsPrepConfig:
        """Create a validated config from a YAML file."""

        raw_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"YAML config `{path}` is not valid YAML: {exc}") from exc
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ConfigurationError(
                f"YAML config `{path}` must contain a top-level mapping/object."
            )
        return ConfigLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str) -> TtsPrepConfig:
        """Build a validated config from a mapping payload."""

        ConfigLoader._validate_keys(
            payload,
            supported=ConfigLoader._SUPPORTED_YAML_KEYS,
            required=ConfigLoader._REQUIRED_YAML_KEYS,
            source_label=source_label,
        )

        input_value = normalize_optional_string(payload.get("input_path"))
        if input_value is None:
            raise ConfigurationError(f"{source_label} requires non-empty `input_path`.")
        output_value = normalize_optional_string(payload.get("output_dir")) or "out"

        raw_options = payload.get("options") or {}
        if not isinstance(raw_options, Mapping):
            raise ConfigurationError(f"{source_label} field `options` must be a mapping/object.")
        ConfigLoader._validate_keys(
            raw_options,
            supported=ConfigLoader._SUPPORTED_OPTION_KEYS,
            required=frozenset(),
            source_label=f"{source_label} `options`",
        )
        options = ConfigLoader._options_from_mapping(raw_options, source_label)

        timeout_value = payload.get("timeout_seconds") or DEFAULT_TIMEOUT_SECONDS
        config = TtsPrepConfig(
            input_path=Path(input_value),
            output_dir=Path(output_value),
            options=options,
            split_strategy=SplitStrategy.parse(payload.get("split_strategy") or "auto"),
            provider=normalize_optional_string(payload.get("provider")) or DEFAULT_PROVIDER,
            model=normalize_optional_string(payload.get("model")) or DEFAULT_GEMINI_MODEL,
            api_key=normalize_optional_string(payload.get("api_key")),
            timeout_seconds=_parse_positive_float(timeout_value, "timeout_seconds"),
            write_archive=ConfigLoader._boolean(
                payload, "write_archive", source_label, default=True
            ),
        )
        config.validate()
        return config

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> TtsPrepConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        input_value = normalize_optional_string(env_map.get("TTSPREP_INPUT"))
        if input_value is None:
            raise ConfigurationError("Environment variable `TTSPREP_INPUT` is required.")

        option_values: dict[str, object] = {}
        for key in _OPTION_TOGGLE_KEYS:
            env_key = f"TTSPREP_{key.upper()}"
            if env_key in env_map:
                option_values[key] = env_map[env_key]
        for key in ("start_page", "end_page"):
            env_key = f"TTSPREP_{key.upper()}"
            if env_key in env_map:
                option_values[key] = env_map[env_key]
        options = ConfigLoader._options_from_mapping(option_values, "Environment")

        runtime_env = {
            key: value
            for key, value in env_map.items()
            if key in ConfigLoader._RUNTIME_ENV_KEYS
            and normalize_optional_string(value) is not None
        }

        config = TtsPrepConfig(
            input_path=Path(input_value),
            output_dir=Path(normalize_optional_string(env_map.get("TTSPREP_OUTPUT_DIR")) or "out"),
            options=options,
            split_strategy=SplitStrategy.parse(
                normalize_optional_string(env_map.get("TTSPREP_SPLIT")) or "auto"
            ),
            provider=normalize_optional_string(env_map.get("TTSPREP_PROVIDER"))
            or DEFAULT_PROVIDER,
            model=normalize_optional_string(env_map.get("TTSPREP_MODEL")) or DEFAULT_GEMINI_MODEL,
            api_key=normalize_optional_string(env_map.get("GEMINI_API_KEY")),
            timeout_seconds=_parse_positive_float(
                normalize_optional_string(env_map.get("TTSPREP_TIMEOUT_SECONDS"))
                or DEFAULT_TIMEOUT_SECONDS,
                "timeout_seconds",
            ),
            runtime_sources=RuntimeConfigSources(env=runtime_env),
        )
        config.validate()
        return config

    @staticmethod
    def _options_from_mapping(payload: Mapping[str, Any], source_label: str) -> CleaningOptions:
        """Build `CleaningOptions` from toggle and page values."""

        toggles = {
            key: ConfigLoader._boolean(payload, key, source_label, default=True)
            for key in _OPTION_TOGGLE_KEYS
        }
        pages: dict[str, int | None] = {}
        for key in ("start_page", "end_page"):
            try:
                pages[key] = parse_optional_page(payload.get(key))
            except ValueError as exc:
                raise ConfigurationError(
                    f"{source_label} field `{key}` must be a positive integer."
                ) from exc
        options = CleaningOptions(**toggles, **pages)
        options.validate()
        return options

    @staticmethod
    def _validate_keys(
        payload: Mapping[str, Any],
        supported: frozenset[str],
        required: frozenset[str],
        source_label: str,
    ) -> None:
        """Validate supported and required mapping keys."""

        unknown = sorted(set(payload).difference(supported))
        if unknown:
            raise ConfigurationError(
                f"{source_label} includes unsupported key(s): {', '.join(unknown)}."
            )
        missing = sorted(key for key in required if key not in payload)
        if missing:
            raise ConfigurationError(
                f"{source_label} is missing required key(s): {', '.join(missing)}."
            )

    @staticmethod
    def _boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default
        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ConfigurationError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
