import sys

from otf_level.cli import main

sys.exit(main())
