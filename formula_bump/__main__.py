import sys

from formula_bump.cli import main

sys.exit(main())
