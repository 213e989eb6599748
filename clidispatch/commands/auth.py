"""Store an API key for the rest of the process."""

import getpass
import os

from clidispatch.commands.base import BaseCommand


class LoginCommand(BaseCommand):
    """Prompt for an API key and export it to the configured variable.

    The dispatcher runs this command when an API call fails authentication
    and no key is set, then retries the original command once.
    """

    def index(self) -> None:
        self.validate_arguments()
        api_key = getpass.getpass('API key: ').strip()
        if not api_key:
            self.error('No API key given.')
        os.environ[self.config.api_key_env] = api_key
        self.display('Logged in.')
