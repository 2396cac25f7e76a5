"""Parser for mailx-style ``mail.rc`` / ``.mailrc`` files.

Only ``set`` lines are relevant; everything else is ignored::

    # comment
    set smtp=smtps://smtp.gmail.com:465
    set smtp-auth-user=hello smtp-auth-password="it's secret"
    set from="Ayd? Alert <ayd@example.com>"  # trailing comment

Recognized keys: ``smtp``, ``smtp-auth-user``, ``smtp-auth-password``,
``from``. Unknown keys are ignored.
"""

import logging
import shlex
from typing import List

from ayd_mailto_alert.addressing import AddressError, parse_endpoint, parse_mailbox

from .exceptions import ConfigurationError
from .models import ConfigDraft

logger = logging.getLogger(__name__)


def split_line(line: str) -> List[str]:
    """Tokenize one line with POSIX shell quoting.

    A token starting with ``#`` ends the line. ``#`` inside a token is kept
    so that passwords like ``pa#ss`` survive.

    Raises:
        ValueError: On unbalanced quotes
    """
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""

    tokens = []
    for token in lexer:
        if token.startswith("#"):
            break
        tokens.append(token)
    return tokens


def apply_setting(draft: ConfigDraft, key: str, value: str) -> ConfigDraft:
    """Apply one ``key=value`` setting to the draft.

    Raises:
        AddressError: If the value of a recognized key is malformed
    """
    if key == "smtp":
        return draft.apply_endpoint(parse_endpoint(value))
    if key == "smtp-auth-user":
        return draft.apply(username=value)
    if key == "smtp-auth-password":
        return draft.apply(password=value)
    if key == "from":
        return draft.apply(sender=parse_mailbox(value))
    return draft


def parse_mailrc(text: str, draft: ConfigDraft, source: str = "<string>") -> ConfigDraft:
    """Fold the settings of one mailrc file into a draft.

    Args:
        text: Whole file content
        draft: Settings folded so far
        source: File name used in error messages

    Returns:
        New draft with this file's settings applied

    Raises:
        ConfigurationError: On unbalanced quotes or a malformed recognized value
    """
    for lineno, line in enumerate(text.splitlines(), 1):
        try:
            tokens = split_line(line)
        except ValueError as e:
            raise ConfigurationError(
                f"{source}:{lineno}: failed to parse line: {e}",
                context=draft.diagnostic_context(),
            ) from e

        if len(tokens) < 2 or tokens[0] != "set":
            continue

        for token in tokens[1:]:
            key, sep, value = token.partition("=")
            if not sep:
                continue

            key = key.strip()
            value = value.split(" #", 1)[0].strip()

            try:
                draft = apply_setting(draft, key, value)
            except AddressError as e:
                raise ConfigurationError(
                    f"{source}:{lineno}: invalid value for `{key}`: {e}",
                    context=draft.diagnostic_context(),
                ) from e

    return draft
