from __future__ import annotations

import os

# obligations.config refuses to import without a database URL.
os.environ.setdefault("DATABASE_URL", "sqlite://")
