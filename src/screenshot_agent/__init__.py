"""screenshot-agent - hand the most recent screenshot to a coding agent."""

__version__ = "0.1.0"
