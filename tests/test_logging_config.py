import logging

from impact_sim.logging_config import setup_logging


def test_setup_logging_replaces_handlers(tmp_path):
    log_file = tmp_path / "impact.log"

    setup_logging(logging.DEBUG)
    logger = setup_logging(logging.DEBUG, str(log_file))
    logging.getLogger("impact_sim.core.session").info("hello from the session")

    assert logger.name == "impact_sim"
    assert len(logger.handlers) == 2
    for handler in logger.handlers:
        handler.flush()
    assert "impact_sim.core.session - INFO - hello from the session" in log_file.read_text(encoding="utf-8")

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
