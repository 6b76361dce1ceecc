from __future__ import annotations

import logging

from .constants import COOKIE_VERSION as __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())
