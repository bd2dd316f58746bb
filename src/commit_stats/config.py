"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "commit_stats.toml"

DEFAULT_BINARY_SNIFF_BYTES = 8000
BINARY_SNIFF_BYTES_CAP = 1024 * 1024
MAX_WORKERS_CAP = 32


@dataclass(slots=True, frozen=True)
class FiltersConfig:
    """Vendor and binary pre-filter settings."""

    vendor_globs: tuple[str, ...] = ()
    binary_sniff_bytes: int = DEFAULT_BINARY_SNIFF_BYTES


@dataclass(slots=True, frozen=True)
class StatsOptions:
    """Accumulation behavior toggles."""

    deleted_lines_as_deletions: bool = False
    max_workers: int = 1


@dataclass(slots=True, frozen=True)
class ClassifiersConfig:
    """Classifier registry toggles."""

    disabled_languages: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class StatsConfig:
    """Fully merged configuration."""

    repo_root: Path
    data_dir: Path
    filters: FiltersConfig
    stats: StatsOptions
    classifiers: ClassifiersConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "repo_root": str(self.repo_root),
            "data_dir": str(self.data_dir),
            "filters": {
                "vendor_globs": list(self.filters.vendor_globs),
                "binary_sniff_bytes": self.filters.binary_sniff_bytes,
            },
            "stats": {
                "deleted_lines_as_deletions": self.stats.deleted_lines_as_deletions,
                "max_workers": self.stats.max_workers,
            },
            "classifiers": {
                "disabled_languages": list(self.classifiers.disabled_languages),
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    binary_sniff_bytes: int | None = None
    deleted_lines_as_deletions: bool | None = None
    max_workers: int | None = None


def default_config(repo_root: Path) -> StatsConfig:
    """Build default config for a given repository root."""
    resolved_root = repo_root.resolve()
    return StatsConfig(
        repo_root=resolved_root,
        data_dir=resolved_root / ".commit_stats",
        filters=FiltersConfig(),
        stats=StatsOptions(),
        classifiers=ClassifiersConfig(),
    )


def load_repo_config_file(repo_root: Path) -> dict[str, object]:
    """Load optional commit_stats.toml from repo root."""
    config_path = repo_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def merge_config(
    base: StatsConfig, repo_payload: dict[str, object], overrides: CliOverrides
) -> StatsConfig:
    """Merge defaults, repo config, then CLI/startup overrides."""
    filters_payload = _get_table(repo_payload, "filters")
    stats_payload = _get_table(repo_payload, "stats")
    classifiers_payload = _get_table(repo_payload, "classifiers")

    vendor_globs = base.filters.vendor_globs
    if "vendor_globs" in filters_payload:
        vendor_globs = _tuple_of_strings(filters_payload["vendor_globs"], "filters", "vendor_globs")
    binary_sniff_bytes = _optional_positive_int_with_cap(
        filters_payload.get("binary_sniff_bytes"),
        "filters.binary_sniff_bytes",
        base.filters.binary_sniff_bytes,
        BINARY_SNIFF_BYTES_CAP,
    )

    deleted_lines_as_deletions = _optional_bool(
        stats_payload.get("deleted_lines_as_deletions"),
        "stats.deleted_lines_as_deletions",
        base.stats.deleted_lines_as_deletions,
    )
    max_workers = _optional_positive_int_with_cap(
        stats_payload.get("max_workers"),
        "stats.max_workers",
        base.stats.max_workers,
        MAX_WORKERS_CAP,
    )

    disabled_languages = base.classifiers.disabled_languages
    if "disabled_languages" in classifiers_payload:
        disabled_languages = _tuple_of_strings(
            classifiers_payload["disabled_languages"], "classifiers", "disabled_languages"
        )

    merged = StatsConfig(
        repo_root=base.repo_root,
        data_dir=base.data_dir,
        filters=FiltersConfig(
            vendor_globs=vendor_globs,
            binary_sniff_bytes=binary_sniff_bytes,
        ),
        stats=StatsOptions(
            deleted_lines_as_deletions=deleted_lines_as_deletions,
            max_workers=max_workers,
        ),
        classifiers=ClassifiersConfig(disabled_languages=disabled_languages),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: StatsConfig, overrides: CliOverrides) -> StatsConfig:
    """Apply startup overrides at highest precedence."""
    binary_sniff_bytes = _optional_positive_int_with_cap(
        overrides.binary_sniff_bytes,
        "overrides.binary_sniff_bytes",
        config.filters.binary_sniff_bytes,
        BINARY_SNIFF_BYTES_CAP,
    )
    max_workers = _optional_positive_int_with_cap(
        overrides.max_workers,
        "overrides.max_workers",
        config.stats.max_workers,
        MAX_WORKERS_CAP,
    )
    deleted_lines_as_deletions = _optional_bool(
        overrides.deleted_lines_as_deletions,
        "overrides.deleted_lines_as_deletions",
        config.stats.deleted_lines_as_deletions,
    )
    data_dir = overrides.data_dir or config.data_dir
    return StatsConfig(
        repo_root=config.repo_root,
        data_dir=data_dir.resolve(),
        filters=FiltersConfig(
            vendor_globs=config.filters.vendor_globs,
            binary_sniff_bytes=binary_sniff_bytes,
        ),
        stats=StatsOptions(
            deleted_lines_as_deletions=deleted_lines_as_deletions,
            max_workers=max_workers,
        ),
        classifiers=config.classifiers,
    )


def load_effective_config(repo_root: Path, overrides: CliOverrides | None = None) -> StatsConfig:
    """Load effective config using merge order defaults -> repo config -> overrides."""
    resolved_root = repo_root.resolve()
    base = default_config(resolved_root)
    payload = load_repo_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
