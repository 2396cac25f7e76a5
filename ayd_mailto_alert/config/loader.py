"""Configuration resolver for ayd-mailto-alert.

Settings are folded in a fixed order, later sources winning field by field:

1. Built-in defaults (secure, default sender)
2. mailrc files, in the order given
3. Environment variables
"""

import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from .environment import apply_environment
from .exceptions import ConfigurationError
from .mailrc import parse_mailrc
from .models import ConfigDraft, SMTPConfig

logger = logging.getLogger(__name__)

SYSTEM_CONFIG_PATHS = (
    Path("/usr/share/misc/mail.rc"),
    Path("/usr/local/etc/mail.rc"),
    Path("/etc/mail.rc"),
)

USER_CONFIG_NAME = ".mailrc"


def default_config_paths(home: Optional[Path] = None) -> List[Path]:
    """
    Build the list of well-known mailrc locations.

    Platform-wide files come first so that the user's ``~/.mailrc`` wins.

    Args:
        home: Home directory; looked up with Path.home() when None

    Returns:
        Ordered list of candidate paths
    """
    paths = list(SYSTEM_CONFIG_PATHS)

    if home is None:
        try:
            home = Path.home()
        except RuntimeError:
            home = None

    if home is not None:
        paths.append(Path(home) / USER_CONFIG_NAME)

    return paths


def load_files(paths: Iterable[Union[str, Path]], draft: ConfigDraft) -> ConfigDraft:
    """
    Fold every existing mailrc file into the draft, in order.

    A file that does not exist is skipped. Any other read error stops
    resolution.

    Raises:
        ConfigurationError: If a file cannot be read or contains a malformed value
    """
    for path in paths:
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            logger.debug(
                f"Config file {path} not found, skipping",
                extra={"event": "config.file.skipped", "path": str(path)},
            )
            continue
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                f"Failed to read configuration file {path}: {e}",
                suggestions=[
                    f"Ensure {path} is a readable UTF-8 text file",
                    "Check file permissions",
                ],
                context=draft.diagnostic_context(),
            ) from e

        draft = parse_mailrc(text, draft, source=str(path))
        logger.debug(
            f"Loaded config file {path}",
            extra={"event": "config.file.loaded", "path": str(path)},
        )

    return draft


def resolve_config(
    paths: Iterable[Union[str, Path]],
    env: Mapping[str, str],
) -> SMTPConfig:
    """
    Resolve SMTP settings from mailrc files and environment variables.

    Args:
        paths: Candidate mailrc files, lowest precedence first
        env: Environment mapping (overrides every file)

    Returns:
        Fully validated SMTPConfig

    Raises:
        ConfigurationError: If a source is invalid or a required field is missing.
            Only the first missing field is reported, checked in the order
            SMTP_SERVER, SMTP_USERNAME, SMTP_PASSWORD.
    """
    draft = ConfigDraft()
    draft = load_files(paths, draft)
    draft = apply_environment(draft, env)
    config = draft.finalize()

    logger.info(
        "Configuration resolved",
        extra={
            "event": "config.resolved",
            "smtp_server": config.host,
            "smtp_port": config.port,
            "secure": config.secure,
        },
    )

    return config
