import pytest

from perf_regression_tracker import monitor
from perf_regression_tracker.dimension_registry import CPU_TIME, KERNEL_TIME, USER_TIME
from perf_regression_tracker.results import ConfigResults


@pytest.fixture(autouse=True)
def reset_monitor():
    monitor.reset()
    yield
    monitor.reset()


def test_detection_runs_once(monkeypatch) -> None:
    calls = []
    real_import = monitor.importlib.import_module

    def counting_import(name):
        calls.append(name)
        return real_import(name)

    monkeypatch.setattr(monitor.importlib, "import_module", counting_import)

    first = monitor.ensure_initialized()
    second = monitor.ensure_initialized()

    assert first is second
    assert first is not monitor.CounterSupport.UNKNOWN
    assert calls == ["resource"]


def test_unavailable_counters_add_nothing(monkeypatch) -> None:
    def failing_import(name):
        raise ImportError(name)

    monkeypatch.setattr(monitor.importlib, "import_module", failing_import)

    assert monitor.ensure_initialized() is monitor.CounterSupport.UNAVAILABLE
    assert monitor.collect_os_counters({"kept": 1}) == {"kept": 1}


def test_available_counters_are_keyed_by_dimension() -> None:
    pytest.importorskip("resource")

    scalars = monitor.collect_os_counters()

    assert set(scalars) == {USER_TIME, KERNEL_TIME, CPU_TIME}
    assert scalars[CPU_TIME] == scalars[USER_TIME] + scalars[KERNEL_TIME]


def test_record_counters_feeds_a_configuration() -> None:
    pytest.importorskip("resource")
    config = ConfigResults(0, "linux")

    monitor.record_counters(config, "N20040101", 0)
    monitor.record_counters(config, "N20040101", 1)

    build = config.get_build("N20040101")
    assert config.build_names() == ["N20040101"]
    assert build.get_count(CPU_TIME) == 2
