import sys

from pfs0.cli import main

sys.exit(main())
