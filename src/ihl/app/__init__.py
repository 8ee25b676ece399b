from .runtime import LineupRuntime, RuntimePaths

__all__ = ["LineupRuntime", "RuntimePaths"]
