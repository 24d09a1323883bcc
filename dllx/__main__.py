import sys

from dllx.cli import main

sys.exit(main())
