import sys

from command_hooks.core.cli import main

sys.exit(main())
