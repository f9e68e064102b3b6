"""ClipFlow Studio CLI"""

import click
from dotenv import load_dotenv

from .agents import agents_cmd
from .catalog import exports_cmd, templates_cmd
from .run import run_cmd
from .secrets import secrets_cli

# Load .env file at CLI startup
load_dotenv()


@click.group()
@click.version_option(version="0.1.0")
def main():
    """ClipFlow Studio - Video to narrated export pipeline

    \b
    Quick Start:
      clipflow run demo.mp4 --mock
      clipflow run demo.mp4 --live -t story-arc

    \b
    Commands:
      run        Run the full workflow on a video
      templates  List script templates
      exports    Show export history
      agents     List agents and their schemas
      secrets    Manage API keys
    """
    pass


main.add_command(run_cmd, name="run")
main.add_command(templates_cmd, name="templates")
main.add_command(exports_cmd, name="exports")
main.add_command(agents_cmd, name="agents")
main.add_command(secrets_cli, name="secrets")


if __name__ == "__main__":
    main()
