import sys

from connloop.cli import main

sys.exit(main())
