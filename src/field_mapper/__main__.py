"""Module entrypoint for `python -m field_mapper`."""

from field_mapper.cli.app import main


if __name__ == "__main__":  # pragma: no cover - exercised via CLI tests
    main()
