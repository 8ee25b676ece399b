from .main_window import BoardSelection, MainWindowFactory, launch_ui

__all__ = ["BoardSelection", "MainWindowFactory", "launch_ui"]
