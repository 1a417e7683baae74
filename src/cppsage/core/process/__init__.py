from cppsage.core.process.abc import ProcessResult, ProcessRunner

__all__ = ["ProcessResult", "ProcessRunner"]
