import os, sys
import logging

# Ensure project root on path for `import app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.core.logging_setup import setup_logging


def test_setup_logging_configures_root_and_quiets_botocore():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug")
        assert root.level == logging.DEBUG
        assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)
        assert logging.getLogger("botocore").level == logging.WARNING
        # module loggers stay enabled
        assert not logging.getLogger("app.routers.images").disabled
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
