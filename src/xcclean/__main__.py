"""Allow ``python -m xcclean``."""

from xcclean.cli import main

if __name__ == "__main__":
    main()
