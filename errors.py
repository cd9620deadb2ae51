from enum import Enum


class ErrorKind(Enum):
    """Failure categories reported through log_setup.report_error."""

    SAMPLE_READ_FAILURE = "SampleReadFailure"
    PROBE_LAUNCH_FAILURE = "ProbeLaunchFailure"
    PROBE_PARSE_SKIP = "ProbeParseSkip"
    PROBE_PROCESS_EXIT = "ProbeProcessExit"
