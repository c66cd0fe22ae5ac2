"""Root conftest — sets env vars BEFORE any deskspace module is imported.

Points DESKSPACE_DIR at a throwaway directory so no test can read or
write the real ~/.deskspace.
"""

import os
import tempfile

import pytest

_OVERRIDE_VARS = ("DESKSPACE_WORKSPACES_DIR", "DESKSPACE_LAUNCH_DELAY", "DESKSPACE_LOG_LEVEL")

# Force-set (not setdefault) to prevent real env vars from leaking into tests
os.environ["DESKSPACE_DIR"] = tempfile.mkdtemp(prefix="deskspace-test-")
for _var in _OVERRIDE_VARS:
    os.environ.pop(_var, None)


@pytest.fixture(autouse=True)
def _clear_override_env():
    """Drop override vars a previous test (e.g. via load_dotenv) left behind."""
    for var in _OVERRIDE_VARS:
        os.environ.pop(var, None)
    yield
