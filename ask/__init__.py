"""
CLI tool that turns natural-language requests into shell commands.

The request is sent to an OpenAI-compatible (or Gemini) chat model, the reply is
screened against a list of dangerous patterns, and the resulting command is
previewed or run after confirmation.
"""

__version__ = "0.1.0"
