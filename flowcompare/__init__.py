"""FlowCompare - workflow version diff and patch engine."""

__version__ = "0.1.0"
