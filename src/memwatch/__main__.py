"""Allow running memwatch with ``python -m memwatch``."""

import sys

from memwatch.cli import main

sys.exit(main())
