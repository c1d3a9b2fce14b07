"""What To Cook: ingredients in, recipe out, with a per-session request quota."""

__version__ = "1.0.0"
