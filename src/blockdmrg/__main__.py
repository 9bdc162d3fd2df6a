"""``python -m blockdmrg`` entry point."""

import sys

from blockdmrg.cli import main

sys.exit(main())
