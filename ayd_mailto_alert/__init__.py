"""E-mail alert plugin for the Ayd? status monitor."""

__version__ = "0.1.0"
__commit__ = "UNKNOWN"

PROGRAM_NAME = "ayd-mailto-alert"
