import sys

from getcalculation.cli import main

sys.exit(main())
