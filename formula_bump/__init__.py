"""Formula Bump - keep a Homebrew tap formula in step with the latest release."""

__version__ = "0.1.0"
