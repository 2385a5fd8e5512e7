"""Module entrypoint for ``python -m filetreesync``.

All argument parsing happens in ``filetreesync.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
