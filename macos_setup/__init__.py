"""macOS setup tools (interactive, config-file driven).

Two commands share one KEY="value" config file:
- macos-install-software: Homebrew apps, one downloaded app, computer name
- macos-customize-system: defaults preferences, Dock items, Dock/Finder restarts

Each tool owns its own keys in the file and never rewrites the other's.
"""

__all__ = []
