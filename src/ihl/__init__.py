"""Ice hockey line-up builder: slot assignment engine, roster tools and exports."""

__version__ = "1.0.0"
