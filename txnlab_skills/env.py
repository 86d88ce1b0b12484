from os import getenv
from pathlib import Path

TXNLAB_SKILLS_DIR = Path(p) if (p := getenv("TXNLAB_SKILLS_DIR")) else None
TXNLAB_SKILLS_HOME = Path(getenv("TXNLAB_SKILLS_HOME", str(Path.home())))
TXNLAB_SKILLS_LOG_LEVEL = getenv("TXNLAB_SKILLS_LOG_LEVEL", "WARNING")
