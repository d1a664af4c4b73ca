from paginggrid import run_gui as run_gui_module


class FakeMessageBox:
    instances = []

    class Icon:
        Critical = 'critical'

    def __init__(self):
        self.text = None
        self.executed = False
        FakeMessageBox.instances.append(self)

    def setWindowTitle(self, title):
        pass

    def setIcon(self, icon):
        pass

    def setText(self, text):
        self.text = text

    def setDetailedText(self, text):
        pass

    def exec(self):
        self.executed = True


def _record_startup(monkeypatch, calls, run_gui):
    monkeypatch.setattr(run_gui_module, "suppress_warnings", lambda: calls.append("warnings"))
    monkeypatch.setattr(run_gui_module, "install_crash_handlers", lambda: calls.append("crash"))
    monkeypatch.setattr(run_gui_module, "run_gui", run_gui)


def test_main_installs_handlers_before_window(monkeypatch):
    calls = []

    def fake_run_gui():
        calls.append("gui")
        return 0

    _record_startup(monkeypatch, calls, fake_run_gui)

    assert run_gui_module.main() == 0
    assert calls == ["warnings", "crash", "gui"]


def test_main_reports_startup_failure(monkeypatch):
    calls = []
    crash_titles = []

    def failing_run_gui():
        raise RuntimeError("no display")

    _record_startup(monkeypatch, calls, failing_run_gui)
    monkeypatch.setattr(run_gui_module, "_append_crash_log",
                        lambda title, exc_info=None: crash_titles.append(title))
    monkeypatch.setattr(run_gui_module, "QMessageBox", FakeMessageBox)
    FakeMessageBox.instances.clear()

    assert run_gui_module.main() == 1
    assert crash_titles == ["TOP-LEVEL EXCEPTION"]
    assert FakeMessageBox.instances[0].text == "no display"
    assert FakeMessageBox.instances[0].executed


def test_demo_items_are_deterministic():
    first = run_gui_module.build_demo_items(5)

    assert first == run_gui_module.build_demo_items(5)
    assert all(60 <= item['height'] <= 220 for item in first)
