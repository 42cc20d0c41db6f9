"""Allow ``python -m cryptowallet``."""
from .cli import main

if __name__ == "__main__":
    main()
