import sys

from fsmkit.cli._dispatcher import main

sys.exit(main())
