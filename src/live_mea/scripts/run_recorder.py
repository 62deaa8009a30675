r"""Script that records frames from the live MEA service.

The default configuration is `settings.yaml` in the configs directory
(`~/.live_mea`), falling back to the file shipped with the package. A
different config file can be specified via the `\--settings-path` argument.

Each recorded sample is summarized on the console. Recorded data is not
written to disk.
"""
import argparse
import asyncio
import logging
from pathlib import Path
import sys

from rich.pretty import pprint
import yaml

from live_mea.client import LiveMEA
from live_mea.core.samples import Recording
from live_mea.errors import MalformedFrame
from live_mea.errors import SessionConnectionError
from live_mea.settings import Settings
from live_mea.util.runtime import configure_logger
from live_mea.util.runtime import initialize_logger
from live_mea.util.settings_loader import check_config_override_str
from live_mea.util.settings_loader import get_default_settings_path
from live_mea.util.settings_loader import load_settings
from live_mea.util.settings_loader import recording_overrides

SCRIPT_NAME = "live-mea-recorder"
logger = logging.getLogger(__name__)


def _parse_args():
    parser = argparse.ArgumentParser(
        description="Record live data from an MEA device.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--settings-path",
        type=Path,
        default=get_default_settings_path(),
        help="Path to the settings.yaml file.",
    )
    parser.add_argument(
        "--overrides",
        "-o",
        nargs="*",
        type=check_config_override_str,
        help=(
            "Specify settings overrides as key-value pairs, separated by spaces. "
            "For example: -o log_level=DEBUG client.response_timeout=5"
        ),
    )
    parser.add_argument(
        "--mea-id",
        type=int,
        default=None,
        help="MEA device to record from (1-4). Overrides recording.mea_id.",
    )
    parser.add_argument(
        "--samples",
        "-n",
        type=int,
        default=None,
        help="Number of samples to record. Overrides recording.n_samples.",
    )
    parser.add_argument(
        "--print-settings-only",
        "-p",
        action="store_true",
        help="Parse/print the settings and exit.",
    )
    args = parser.parse_args()
    return args


def _log_recording(recording: Recording) -> None:
    for i, sample in enumerate(recording):
        logger.info(
            f"Sample {i}: received at {sample.timestamp.isoformat()}, "
            f"shape={sample.data.shape}, "
            f"min={sample.data.min():.4g}, max={sample.data.max():.4g}"
        )


def run():
    """Load the configuration and record samples from the live MEA service."""
    initialize_logger(SCRIPT_NAME)
    args = _parse_args()
    overrides = recording_overrides(args.overrides, args.mea_id, args.samples)
    settings = load_settings(
        args.settings_path, settings_parser=Settings, override_dotlist=overrides
    )
    if args.print_settings_only:
        pprint(settings)
        return

    configure_logger(SCRIPT_NAME, settings.log_level)
    settings_dump = yaml.dump(settings.model_dump(mode="json"))
    logger.debug(f"run_recorder settings:\n{settings_dump}")

    live_mea = LiveMEA.from_settings(settings.client)
    recording_settings = settings.recording
    try:
        recording = asyncio.run(
            live_mea.record_n_samples(
                recording_settings.mea_id, recording_settings.n_samples
            )
        )
    except (SessionConnectionError, MalformedFrame) as error:
        logger.error(f"Recording failed: {error}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("CTRL+C received. Exiting...")
        return

    _log_recording(recording)
    logger.info(
        f"Recorded {len(recording)} samples from MEA {recording_settings.mea_id}"
    )


if __name__ == "__main__":
    run()
