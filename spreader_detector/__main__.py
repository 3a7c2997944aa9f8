"""Allow ``python -m spreader_detector``."""
import sys

from spreader_detector.cli import main

sys.exit(main())
