"""Configuration: descriptor and coefficient file paths from environment or config.toml."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from jpl_ephemeris.errors import ConfigError, ResourceReadError

logger = logging.getLogger(__name__)

# Env var overrides with defaults relative to the working directory.
DEFAULT_INITIAL_DATA_PATH = 'assets/Initial_data.dat'
DEFAULT_HEADER_PATH = 'assets/header.441'
DEFAULT_COEFFICIENTS_PATH = 'assets/linux_m13000p17000.441'

# config.toml [paths] keys
_TOML_KEYS = {
    'initial_data': 'initial_data_dat',
    'header': 'header_441',
    'coefficients': 'nasa_jpl_de441',
}


@dataclass(frozen=True)
class ResourcePaths:
    """Resolved resource locations for one ephemeris."""

    initial_data: Path
    header: Path
    coefficients: Path | None = None


def get_initial_data_path() -> str:
    """Return Initial_data.dat path (INITIAL_DATA_DAT env var or default)."""
    return os.environ.get('INITIAL_DATA_DAT', DEFAULT_INITIAL_DATA_PATH)


def get_header_path() -> str:
    """Return ASCII header path (HEADER_441 env var or default)."""
    return os.environ.get('HEADER_441', DEFAULT_HEADER_PATH)


def get_coefficients_path() -> str:
    """Return binary coefficient file path (NASA_JPL_DE441 env var or default)."""
    return os.environ.get('NASA_JPL_DE441', DEFAULT_COEFFICIENTS_PATH)


def get_leapsecs_path() -> str | None:
    """Return a NAIF LSK path for rms-julian, or None to use its bundled kernel.

    Returns:
        Value of JULIAN_LEAPSECS when set and non-blank, else None.
    """
    path = os.environ.get('JULIAN_LEAPSECS', '').strip()
    return path or None


def read_config_file(config_path: str | Path) -> dict[str, str]:
    """Read the [paths] table of a config.toml file.

    Parameters:
        config_path: Path to the TOML file.

    Returns:
        Mapping with any of the keys initial_data, header, coefficients.

    Raises:
        ConfigError: File missing, not valid TOML, or [paths] malformed.
    """
    path = Path(config_path)
    try:
        with path.open('rb') as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f'Failed to load {path}: file not found') from e
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f'Failed to load {path}: {e}') from e
    paths = data.get('paths')
    if not isinstance(paths, dict):
        raise ConfigError(f'Failed to deserialize config {path}: missing [paths] table')
    out: dict[str, str] = {}
    for field_name, key in _TOML_KEYS.items():
        value = paths.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(f'Failed to deserialize config {path}: {key} must be a string')
        out[field_name] = value
    return out


def _validate_file(path: Path) -> Path:
    if not path.is_file():
        raise ConfigError(f'Required file not found: {path}')
    return path


def resolve_paths(config_path: str | Path | None = None) -> ResourcePaths:
    """Resolve resource paths from config.toml (if given) or the environment.

    Values in config.toml take precedence; any key it omits falls back to the
    environment/default lookup. The two text descriptors must exist; the
    coefficient file is carried along only if it exists.

    Parameters:
        config_path: Optional path to config.toml.

    Returns:
        ResourcePaths.

    Raises:
        ConfigError: Config file unusable or a required descriptor missing.
    """
    from_file = read_config_file(config_path) if config_path is not None else {}
    initial_data = Path(from_file.get('initial_data', get_initial_data_path()))
    header = Path(from_file.get('header', get_header_path()))
    coefficients = Path(from_file.get('coefficients', get_coefficients_path()))
    _validate_file(initial_data)
    _validate_file(header)
    if not coefficients.is_file():
        logger.debug('Coefficient file %s not found; continuing without it', coefficients)
        return ResourcePaths(initial_data=initial_data, header=header)
    return ResourcePaths(initial_data=initial_data, header=header, coefficients=coefficients)


def read_resource(path: str | Path) -> str:
    """Read a whole text descriptor into memory.

    Parameters:
        path: Resource path.

    Returns:
        File contents.

    Raises:
        ConfigError: Path does not exist or is not a file.
        ResourceReadError: File exists but could not be read or decoded.
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f'Required file not found: {p}')
    try:
        return p.read_text(encoding='utf-8', errors='strict')
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceReadError(f'Failed to read {p}: {e}') from e
