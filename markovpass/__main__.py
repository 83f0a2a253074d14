#!/usr/bin/env python3
"""Allow ``python -m markovpass``."""

import sys

from .cli import main

sys.exit(main())
