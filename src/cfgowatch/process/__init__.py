"""External process execution for the generator."""

from cfgowatch.process.protocol import ProcessRunner
from cfgowatch.process.result import ProcessResult
from cfgowatch.process.subprocess_runner import SubprocessRunner

__all__ = [
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
]
