import os

import matplotlib
import pytest

from config import global_config
from profiler import Profiler

os.environ.setdefault("MPLBACKEND", "Agg")
matplotlib.use(os.environ.get("MPLBACKEND", "Agg"), force=True)


@pytest.fixture(autouse=True)
def _fresh_state():
    global_config.reset_defaults()
    Profiler.reset()
    yield
    global_config.reset_defaults()
    Profiler.reset()
