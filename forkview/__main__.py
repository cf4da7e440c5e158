"""Module entrypoint for ``python -m forkview``.

All argument parsing and runtime setup happen in ``forkview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
