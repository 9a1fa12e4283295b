"""Errors raised while reading performance counter data"""


class PerfDataError(Exception):
    """Base class for performance counter access failures"""


class PerfDataDecodeError(PerfDataError):
    """A snapshot blob could not be decoded into the expected record layout"""


class PerfObjectNotFoundError(PerfDataError):
    """The performance object is missing or has no records for this scrape"""

    def __init__(self, object_name: str, reason: str = "no records"):
        self.object_name = object_name
        super().__init__(f"performance object '{object_name}': {reason}")


class InstanceNotFoundError(PerfDataError):
    """A counter table result lacks the expected instance or counter"""

    def __init__(self, object_name: str, instance: str, counter: str = None):
        self.object_name = object_name
        self.instance = instance
        self.counter = counter
        if counter is None:
            message = f"instance '{instance}' not found in '{object_name}' result set"
        else:
            message = f"counter '{counter}' not found for instance '{instance}' of '{object_name}'"
        super().__init__(message)


class CounterTableError(PerfDataError):
    """A counter table handle could not be opened or queried"""


class PerfDataReadError(PerfDataError):
    """A snapshot exists but could not be read"""

    def __init__(self, object_name: str, reason: str):
        self.object_name = object_name
        super().__init__(f"failed to read performance object '{object_name}': {reason}")
