import sys

from bftape.cli import main

sys.exit(main())
