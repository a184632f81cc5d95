from __future__ import annotations

import sys

from w3r.cli import main

sys.exit(main())
