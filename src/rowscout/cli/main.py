"""CLI entry point."""

# Import command modules so @app.command() decorators register
import rowscout.cli.commands.discover  # noqa: F401, E402
import rowscout.cli.commands.export  # noqa: F401, E402
from rowscout.cli.app import app


def main():
    app()


if __name__ == "__main__":
    main()
