import sys

from weathersync.cli import main

sys.exit(main())
