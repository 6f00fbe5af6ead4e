"""Entry point for `python -m copyous`."""


def main():
    from copyous.cli import app
    app()


if __name__ == "__main__":
    main()
