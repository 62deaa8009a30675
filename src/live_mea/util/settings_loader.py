"""Locate, read and validate the recorder settings.

Settings come from a YAML file, by default the user's `settings.yaml` in the
configs directory or the copy shipped with the package. Command line values
are merged on top as OmegaConf dot-list overrides and the result is validated
again, so an override can never bypass the schema.
"""
import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Type, TypeVar

from omegaconf import OmegaConf
from pydantic import BaseModel
from pydantic import ValidationError
import yaml

from live_mea.util.runtime import get_configs_dir

logger = logging.getLogger(__name__)

SettingsT = TypeVar("SettingsT", bound=BaseModel)

SETTINGS_FILE_NAME = "settings.yaml"
PACKAGED_SETTINGS_PATH = Path(__file__).parent.parent.joinpath(
    "config", SETTINGS_FILE_NAME
)


def get_user_settings_path() -> Path:
    """Get the location of the user's settings file, which may not exist."""
    return Path(get_configs_dir()).joinpath(SETTINGS_FILE_NAME)


def get_default_settings_path() -> Path:
    """Get the settings file used when none is given on the command line.

    Returns:
        The user's settings file if it exists, otherwise the default settings
        shipped with the package.
    """
    user_settings = get_user_settings_path()
    if user_settings.exists():
        return user_settings
    return PACKAGED_SETTINGS_PATH


def recording_overrides(
    overrides: Optional[Sequence[str]] = None,
    mea_id: Optional[int] = None,
    n_samples: Optional[int] = None,
) -> Optional[list[str]]:
    """Merge dedicated recording arguments into a dot-list of overrides.

    The dedicated arguments are appended last so they win over a generic
    override of the same key.

    Args:
        overrides: Generic `key.subkey=value` overrides.
        mea_id: MEA device to record from, if given.
        n_samples: Number of samples to record, if given.

    Returns:
        The combined overrides, or None if there is nothing to override.
    """
    dotlist = list(overrides or [])
    if mea_id is not None:
        dotlist.append(f"recording.mea_id={mea_id}")
    if n_samples is not None:
        dotlist.append(f"recording.n_samples={n_samples}")
    return dotlist or None


def load_settings(
    settings_file: os.PathLike,
    settings_parser: Type[SettingsT],
    override_dotlist: Optional[list[str]] = None,
) -> SettingsT:
    """Read a YAML settings file and validate it, applying overrides.

    Args:
        settings_file: Path to the YAML settings file.
        settings_parser: Pydantic model describing the settings.
        override_dotlist: Optional `key.subkey=value` pairs applied on top of
            the file contents.

    Returns:
        The validated settings.

    Raises:
        FileNotFoundError: If `settings_file` does not exist.
        pydantic.ValidationError: If the file contents or the overrides do not
            match the schema.
    """
    settings_dict = _read_settings_file(settings_file)
    settings = _validate(settings_parser, settings_dict, f"'{settings_file}'")
    if not override_dotlist:
        return settings

    overrides_conf = OmegaConf.from_dotlist(override_dotlist)
    merged_dict = OmegaConf.to_object(OmegaConf.merge(settings_dict, overrides_conf))
    logger.debug(f"Applied settings overrides: {override_dotlist}")
    return _validate(settings_parser, merged_dict, "the overrides")


def _read_settings_file(settings_file: os.PathLike) -> Dict[str, Any]:
    try:
        with open(settings_file, "r") as f:
            contents = yaml.safe_load(f)
    except FileNotFoundError as file_error:
        raise FileNotFoundError(
            f"Settings file not found: {settings_file}.\n"
            f"\tThe default settings are in {PACKAGED_SETTINGS_PATH}.\n"
            f"\tCopy that file to {get_user_settings_path()} to customize it,\n"
            "\tor pass another file via the '--settings-path' argument."
        ) from file_error
    # An empty file means every field takes its default.
    return contents or {}


def _validate(
    settings_parser: Type[SettingsT], settings_dict: Dict[str, Any], source: str
) -> SettingsT:
    try:
        return settings_parser.model_validate(settings_dict)
    except ValidationError:
        logger.error(f"Settings from {source} do not match the expected schema.")
        raise


def check_config_override_str(value: str) -> str:
    """Argparse type accepting a single `key=value` or `key.subkey=value` pair.

    Only the key is checked here; OmegaConf parses the value.

    Raises:
        argparse.ArgumentTypeError: If there is no `=` or a key part is empty.
    """
    key, separator, _ = value.partition("=")
    if not separator or "" in key.split("."):
        raise argparse.ArgumentTypeError(
            f"Invalid config-override: {value}\n"
            "\tExpected format: `key=value` or `key.subkey=value`"
        )
    return value
