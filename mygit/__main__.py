"""Run the CLI: python -m mygit <cmd> ..."""

import sys

from .cli import main

sys.exit(main())
