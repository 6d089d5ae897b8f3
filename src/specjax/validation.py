import os


def reference_enabled() -> bool:
    return os.getenv("SPECJAX_RUN_REFERENCE", "0") == "1"


__all__ = ["reference_enabled"]
