import sys

from sitegraph.cli import main

sys.exit(main())
