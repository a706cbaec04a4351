"""twofauth: command-line TOTP authenticator."""

__version__ = "0.1.0"
