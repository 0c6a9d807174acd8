"""Allow ``python -m crudgen``."""

import sys

from crudgen.cli import main

sys.exit(main())
