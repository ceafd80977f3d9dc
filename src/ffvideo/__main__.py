"""Allow ``python -m ffvideo``."""

from .cli import main

if __name__ == "__main__":
    main()
