import sys

from floodcheck.cli import main

sys.exit(main())
