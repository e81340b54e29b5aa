"""Allow ``python -m src.cli`` execution."""

import sys

from src.cli.gateway import main

sys.exit(main())
