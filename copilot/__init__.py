"""Hotel maintenance copilot: tool-calling chat agent and vector similarity search."""

__version__ = "1.0.0"
