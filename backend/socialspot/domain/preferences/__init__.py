from .store import PreferenceError, PreferenceStore

__all__ = ["PreferenceError", "PreferenceStore"]
