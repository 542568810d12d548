import pytest

from saferviewer.settings import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        home_dir=tmp_path / "home",
        log_file=tmp_path / "saferviewer.log",
        redirect_host="127.0.0.1",
        redirect_port=0,
        request_timeout=5.0,
        output_title=None,
        share_with_anyone=False,
    )
