import rclonemgr.logger as logger


def test_summarize_matching_length():
    assert logger.summarize("@reboot", max_length=7) == "@reboot"


def test_summarize_exceeding_length():
    assert logger.summarize("@reboot rclone mount", max_length=10) == "@reboot..."


def test_summarize_dict():
    submission = {"remote_name": "photos"}
    assert logger.summarize(submission, max_length=8) == "{'rem..."
