import sys

from gitwip.cli import main

sys.exit(main())
