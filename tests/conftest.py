import logging
import os

os.environ.setdefault("MPLBACKEND", "Agg")

import matplotlib  # noqa: E402

matplotlib.use("Agg", force=True)

import pytest  # noqa: E402

from climax_shuffle_sim import io_utils  # noqa: E402


@pytest.fixture
def isolated_results(tmp_path, monkeypatch):
    """Point results/ at a temp dir and give the package logger fresh handlers."""
    monkeypatch.setattr(io_utils, "results_root", lambda: tmp_path)
    logger = logging.getLogger(io_utils.LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True
    logger._configured = False
    yield tmp_path
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
    logger.propagate = True
    logger._configured = False
