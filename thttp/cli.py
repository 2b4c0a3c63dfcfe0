import sys

import click

from thttp.app import HttpTesterApp
from thttp.logging_config import configure_logging


@click.command()
def main() -> None:
    """Run the HTTP endpoint tester TUI."""
    configure_logging()
    app = HttpTesterApp()
    try:
        app.run()
    except Exception as exc:
        click.echo(exc)
        sys.exit(1)
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
