"""Allow `python -m scripts` by running the dot generation script."""

import sys

from scripts.generate_dots import main

sys.exit(main())
