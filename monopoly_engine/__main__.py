import sys

from monopoly_engine.cli import main

sys.exit(main())
