"""Allow running as ``python -m twofauth``."""

from twofauth.cli import main

if __name__ == "__main__":
    main()
