"""
Operating system counter collection.

Counters come from getrusage() through the `resource` module, which only
exists on Unix platforms. Support is detected once per process and cached.
"""

import enum
import importlib
import threading

from perf_regression_tracker.dimension_registry import CPU_TIME, KERNEL_TIME, USER_TIME


class CounterSupport(enum.Enum):
    UNKNOWN = 0
    UNAVAILABLE = 1
    AVAILABLE = 2


_lock = threading.Lock()
_support = CounterSupport.UNKNOWN
_resource = None


def _detect():
    global _support, _resource
    try:
        _resource = importlib.import_module("resource")
        _support = CounterSupport.AVAILABLE
    except ImportError:
        _support = CounterSupport.UNAVAILABLE


def ensure_initialized() -> CounterSupport:
    """Detect counter support on first call and return the cached result."""
    with _lock:
        if _support is CounterSupport.UNKNOWN:
            _detect()
        return _support


def reset():
    """Forget the detection result so the next call detects again."""
    global _support, _resource
    with _lock:
        _support = CounterSupport.UNKNOWN
        _resource = None


def collect_os_counters(scalars=None):
    """
    Add user, kernel and CPU time of this process (milliseconds) to scalars,
    keyed by dimension id. Nothing is added when counters are unavailable.
    """
    if scalars is None:
        scalars = {}
    with _lock:
        if _support is CounterSupport.UNKNOWN:
            _detect()
        if _support is not CounterSupport.AVAILABLE:
            return scalars
        usage = _resource.getrusage(_resource.RUSAGE_SELF)
    user_time = int(usage.ru_utime * 1000)
    kernel_time = int(usage.ru_stime * 1000)
    scalars[USER_TIME] = user_time
    scalars[KERNEL_TIME] = kernel_time
    scalars[CPU_TIME] = user_time + kernel_time
    return scalars


def record_counters(config, build_name, step):
    """Collect the counters and record them as samples of a configuration build."""
    scalars = collect_os_counters()
    for dim_id, value in scalars.items():
        config.set_value(build_name, dim_id, step, value)
    return scalars
