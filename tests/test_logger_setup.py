import os

from loguru import logger

from evodevo.utils.logger_setup import setup_logger


def test_log_file_is_named_after_the_run(tmp_path):
    log_file = setup_logger(run_name="blob_sweep", log_dir=str(tmp_path), enable_colors=False)
    logger.info("[Test] marker line")
    # Removing the sinks closes the file
    logger.remove()

    assert os.path.dirname(log_file) == str(tmp_path)
    assert os.path.basename(log_file).startswith("blob_sweep_")
    assert log_file.endswith(".log")
    with open(log_file, encoding="utf-8") as f:
        content = f.read()
    assert "blob_sweep" in content
    assert "[Test] marker line" in content
