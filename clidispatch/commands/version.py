"""Display version information."""

import platform

from clidispatch import __version__
from clidispatch.commands.base import BaseCommand


class VersionCommand(BaseCommand):
    def index(self) -> None:
        self.validate_arguments()
        self.display(f'{self.config.program}/{__version__} python/{platform.python_version()}')
