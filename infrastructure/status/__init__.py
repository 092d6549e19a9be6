from .status_reporter import RunLoggerStatusReporter, StructlogStatusReporter
