"""Tax configuration loading and versioning for PAYE Calc.

Tax rules are YAML (or JSON) files named by tax year:

    <config dir>/tax-rules/2026.yaml     user overrides
    payecalc/tax_rules/2026.yaml         packaged defaults

Config directory resolution:
1. PAYE_CALC_CONFIG_PATH environment variable (if set)
2. $XDG_CONFIG_HOME/paye-calc/ (defaults to ~/.config/paye-calc/)

Year resolution: the requested year if a file exists in either location,
else the latest prior year available, else the latest year overall.
User files win over packaged files for the same year.

A loaded TaxConfig is immutable. revise_config() applies a partial
settings update and returns a new TaxConfig with version + 1.
"""

import json
import logging
import os
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError

from .errors import ConfigNotFoundError, ConfigurationError
from .taxes.schemas import TaxConfig
from .taxes.validation import validate_config

logger = logging.getLogger(__name__)

APP_NAME = "paye-calc"
CONFIG_PATH_ENV = "PAYE_CALC_CONFIG_PATH"
RULES_DIRNAME = "tax-rules"
RULES_SUFFIXES = (".yaml", ".yml", ".json")


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAYE_CALC_CONFIG_PATH environment variable
    2. ~/.config/paye-calc/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_user_rules_dir() -> Path:
    """Directory for user-supplied tax rules (may not exist)."""
    return get_config_dir() / RULES_DIRNAME


def get_packaged_rules_dir() -> Path:
    """Directory holding the tax rules shipped with the package."""
    return Path(__file__).parent.parent / "tax_rules"


def _rules_files(rules_dir: Path) -> Dict[int, Path]:
    files = {}
    if not rules_dir.is_dir():
        return files
    for path in sorted(rules_dir.iterdir()):
        if path.suffix in RULES_SUFFIXES and path.stem.isdigit():
            files.setdefault(int(path.stem), path)
    return files


def get_available_years() -> List[int]:
    """Sorted list of tax years with rules available (descending)."""
    years = set(_rules_files(get_packaged_rules_dir())) | set(_rules_files(get_user_rules_dir()))
    return sorted(years, reverse=True)


def find_rules_file(year: Optional[int] = None) -> Path:
    """Resolve the rules file for a tax year.

    Args:
        year: Tax year; None means the latest available

    Raises:
        ConfigNotFoundError: If no rules file exists at all
    """
    user_files = _rules_files(get_user_rules_dir())
    packaged_files = _rules_files(get_packaged_rules_dir())
    available = sorted(set(user_files) | set(packaged_files), reverse=True)

    if not available:
        raise ConfigNotFoundError(
            f"No tax rules found. Checked:\n"
            f"  1. {get_user_rules_dir()}\n"
            f"  2. {get_packaged_rules_dir()}"
        )

    if year is None:
        chosen = available[0]
    else:
        candidates = [y for y in available if y <= int(year)]
        chosen = candidates[0] if candidates else available[0]
        if chosen != int(year):
            logger.warning(f"No tax rules for {year}, using {chosen}")

    return user_files.get(chosen) or packaged_files[chosen]


def load_config_file(path: Union[str, Path]) -> dict:
    """Read a YAML or JSON settings file into a dict.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigurationError: If the file cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigNotFoundError(f"Tax rules file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot parse tax rules file {path}", [str(e)])

    if not isinstance(data, dict):
        raise ConfigurationError(f"Tax rules file {path} must contain a mapping")
    return data


def load_tax_config(
    year: Optional[int] = None,
    path: Optional[Union[str, Path]] = None,
    validate: bool = True,
) -> TaxConfig:
    """Load a TaxConfig from an explicit file or the rules directories.

    Args:
        year: Tax year to resolve (ignored when path is given)
        path: Explicit YAML/JSON file
        validate: Run validate_config() and raise on failure

    Raises:
        ConfigNotFoundError: If nothing resolves
        ConfigurationError: If the file is unparsable or invalid
    """
    source = Path(path) if path else find_rules_file(year)
    data = load_config_file(source)
    logger.debug(f"loading tax config from {source}")

    if validate:
        result = validate_config(data)
        if not result.is_valid:
            raise ConfigurationError(f"Invalid tax configuration in {source}", list(result.errors))

    try:
        return TaxConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid tax configuration in {source}", [str(e)])


def default_tax_config(year: Optional[int] = None) -> TaxConfig:
    """Packaged rules for a year (latest if None), ignoring user overrides."""
    packaged = _rules_files(get_packaged_rules_dir())
    if not packaged:
        raise ConfigNotFoundError(f"No packaged tax rules in {get_packaged_rules_dir()}")
    if year is None or int(year) not in packaged:
        year = max(packaged)
    return load_tax_config(path=packaged[int(year)])


def save_tax_config(config: TaxConfig, path: Optional[Path] = None) -> Path:
    """Write a TaxConfig as YAML (default: user rules dir, <tax_year>.yaml).

    Returns:
        Path to the saved file
    """
    if path is None:
        rules_dir = get_user_rules_dir()
        rules_dir.mkdir(parents=True, exist_ok=True)
        path = rules_dir / f"{config.tax_year}.yaml"

    data = config_to_dict(config)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    return path


def config_to_dict(config: TaxConfig) -> dict:
    """JSON-shaped dict with camelCase keys, as a settings store holds it."""
    return to_plain(config.model_dump(by_alias=True))


def to_plain(value: Any) -> Any:
    """Model dump to plain JSON/YAML types: Decimal to int or float, date to ISO string."""
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


# =============================================================================
# Versioned updates
# =============================================================================


def _to_field_names(model_cls: type, data: Any) -> Any:
    """Rewrite camelCase alias keys to field names, recursing into submodels."""
    if not isinstance(data, Mapping):
        return data
    aliases = {f.alias: name for name, f in model_cls.model_fields.items() if f.alias}
    out = {}
    for key, value in data.items():
        name = aliases.get(key, key)
        field = model_cls.model_fields.get(name)
        annotation = field.annotation if field else None
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            value = _to_field_names(annotation, value)
        out[name] = value
    return out


def _deep_merge(base: dict, changes: Mapping) -> dict:
    merged = dict(base)
    for key, value in changes.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def revise_config(config: TaxConfig, changes: Mapping[str, Any], strict: bool = False) -> TaxConfig:
    """Apply a partial settings update, returning a new TaxConfig.

    Nested sections (statutoryRates, reliefs) merge key by key; the bracket
    table is replaced whole. The input config is not modified and the new
    config's version is one higher unless changes set it.

    Args:
        config: Current configuration
        changes: Partial update, camelCase or snake_case keys
        strict: Raise ConfigurationError if the result fails validation

    Raises:
        ConfigurationError: If the merged data is structurally invalid, or
            strict and it fails validate_config()
    """
    updates = _to_field_names(TaxConfig, changes)
    merged = _deep_merge(config.model_dump(), updates)
    if "version" not in updates:
        merged["version"] = config.version + 1

    try:
        revised = TaxConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError("Settings update is not a valid tax configuration", [str(e)])

    if strict:
        result = validate_config(revised)
        if not result.is_valid:
            raise ConfigurationError("Settings update rejected", list(result.errors))

    logger.debug(f"revised tax config {config.tax_year} v{config.version} -> v{revised.version}")
    return revised
