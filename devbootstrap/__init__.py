"""macOS developer workstation bootstrap.

Stages run strictly in order:
- OS preferences (trackpad, gestures)
- Homebrew install and activation
- CLI tools and desktop apps
- git identity and SSH key
- GitHub repositories under ~/development
- VS Code extensions and settings
- Homebrew cache cleanup

Every stage is safe to re-run.
"""

__all__ = []
