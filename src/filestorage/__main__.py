"""Allow ``python -m filestorage``."""

import sys

from filestorage.cli import main

sys.exit(main())
