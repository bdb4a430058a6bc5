"""Run the inspection CLI with python -m lottiekit."""

import sys

from lottiekit.cli import main

sys.exit(main())
