import pytest

from rrtstar_planner.utils import utils


class RecordingRosLogger:
    def __init__(self):
        self.lines = []

    def info(self, message: str):
        self.lines.append(("info", message))

    def error(self, message: str):
        self.lines.append(("error", message))


class TestPlannerLogger:
    def setup_method(self):
        self.ros_logger = RecordingRosLogger()
        self.logger = utils.PlannerLogger(printout=False, ros2_logger=self.ros_logger)

    def test_levels(self):
        self.logger.info("starting", 1)
        self.logger.error("failed", 1)
        assert self.logger.messages() == ["starting", "failed"]
        assert self.logger.messages("error") == ["failed"]
        assert self.ros_logger.lines == [
            ("info", "[rrtstar]:[plan=1]: starting"),
            ("error", "[rrtstar]:[plan=1]: failed"),
        ]

    def test_printout(self, capsys):
        logger = utils.PlannerLogger(printout=True)
        logger.info("hello", 3)
        assert capsys.readouterr().out.strip() == "At plan 3: 'hello'"

    def test_log_to_json(self):
        log = utils.PlannerLog("hello", 2, timestamp="now")
        assert '"message": "hello"' in log.toJSON()

    def test_history_is_bounded(self):
        logger = utils.PlannerLogger(printout=False, ros2_logger=self.ros_logger, max_records=3)
        for i in range(5):
            logger.info(f"message {i}", i)
        assert logger.messages() == ["message 2", "message 3", "message 4"]
        assert logger.maxlen == 3
        # Forwarding is not affected by the bound
        assert len(self.ros_logger.lines) == 5

    def test_rejects_empty_history(self):
        with pytest.raises(ValueError):
            utils.PlannerLogger(printout=False, max_records=0)


def test_interpolate():
    assert utils.interpolate((0.0, 0.0), (2.0, -4.0), 0.25) == (0.5, -1.0)
    assert utils.euclidean_distance((0.0, 0.0), (3.0, 4.0)) == 5.0
