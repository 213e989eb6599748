"""Process exit codes returned by the dispatcher and the CLI entry point."""

SUCCESS = 0
"""The command completed, or a redirect such as help ran cleanly."""

GENERAL_ERROR = 1
"""A failure was reported to the user, or arguments failed validation."""

KEYBOARD_INTERRUPT = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""
