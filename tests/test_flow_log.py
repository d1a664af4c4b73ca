from paginggrid.utils import flow_log as flow_log_module
from paginggrid.utils.flow_log import FlowLogger


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def test_formats_component_level_and_fields():
    lines = []
    logger = FlowLogger(sink=lines.append, minimal=False, clock=FakeClock(3600.25))

    logger("PAGING", "Fetch done", level="info", items=20, end=False)

    assert len(lines) == 1
    assert lines[0].endswith("[TRACE][PAGING][INFO] Fetch done items=20 end=False")
    assert ".250]" in lines[0]


def test_minimal_mode_drops_debug():
    lines = []
    logger = FlowLogger(sink=lines.append, minimal=True)

    logger("PAGING", "State -> data")
    logger("PAGING", "Fetch failed", level="ERROR")

    assert len(lines) == 1
    assert "Fetch failed" in lines[0]


def test_minimal_mode_follows_setting(monkeypatch):
    class FakeSettings:
        def value(self, key, defaultValue=None, type=None):
            assert key == 'minimal_trace_logs'
            return False

    monkeypatch.setattr(flow_log_module, "settings", FakeSettings())
    lines = []
    logger = FlowLogger(sink=lines.append)

    logger("PAGING", "State -> loading")

    assert len(lines) == 1


def test_throttle_key_limits_rate():
    lines = []
    clock = FakeClock(10.0)
    logger = FlowLogger(sink=lines.append, minimal=False, clock=clock)

    logger("PAGING", "dropped", throttle_key="drop", every_s=0.5)
    clock.now = 10.2
    logger("PAGING", "dropped", throttle_key="drop", every_s=0.5)
    clock.now = 10.6
    logger("PAGING", "dropped", throttle_key="drop", every_s=0.5)

    assert len(lines) == 2


def test_unknown_level_is_treated_as_debug():
    lines = []
    logger = FlowLogger(sink=lines.append, minimal=True)

    logger("PAGING", "odd", level="TRACE")

    assert lines == []
