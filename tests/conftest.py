import os
import sys
from pathlib import Path

# Ensure the 'src' directory (and the repo root, for tests._helpers) is on sys.path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (SRC, ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

# Keep CLI invocations quiet in tests
os.environ.setdefault("MERKLE_LOG_LEVEL", "WARNING")
