import os
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import config  # noqa: E402

# Keep test runs from writing the log file into the working directory
config.LOG_FILE = os.path.join(tempfile.gettempdir(), "sonic_test_log.txt")
