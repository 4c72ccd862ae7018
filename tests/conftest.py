import os
import sys
import tempfile
from pathlib import Path

os.environ.setdefault("HUGINN_LOG_TO_CONSOLE", "false")
os.environ.setdefault("HUGINN_LOG_DIR", str(Path(tempfile.gettempdir()) / "huginn_test_logs"))
os.environ.setdefault("HUGINN_AUTH_TOKEN", "test-token")
os.environ.setdefault("ENVIRONMENT", "production")


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
