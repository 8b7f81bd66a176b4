import sys

from cc_ci_setup.cli import main

sys.exit(main())
