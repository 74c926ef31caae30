"""Credential resolution for `reviewdesk login`.

Resolution order (stops at first success), per field:
  1. --username / --password options
  2. REVIEWDESK_USERNAME / REVIEWDESK_PASSWORD environment variables
     (CI jobs that run reviewdesk non-interactively)
  3. Interactive prompt (password hidden)
"""

from __future__ import annotations

import logging
import os

import click

logger = logging.getLogger(__name__)

USERNAME_ENV = "REVIEWDESK_USERNAME"
PASSWORD_ENV = "REVIEWDESK_PASSWORD"


def resolve_credentials(username: str | None = None, password: str | None = None) -> tuple[str, str]:
    """Return a (username, password) pair, prompting for whatever is still missing."""
    username = username or os.environ.get(USERNAME_ENV)
    password = password or os.environ.get(PASSWORD_ENV)

    if not username:
        username = click.prompt("Username")
    else:
        logger.debug("Using username %s from options or environment", username)
    if not password:
        password = click.prompt("Password", hide_input=True)

    username = username.strip()
    if not username or not password:
        raise click.UsageError("Username and password are required.")
    return username, password
