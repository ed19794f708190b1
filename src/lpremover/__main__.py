"""Allow `python -m lpremover`."""

from lpremover.cli import main

if __name__ == "__main__":
    main()
