#!/usr/bin/env python3
"""Unified web application deployment tools: CLI entrypoint."""

import argparse

from unideploy.commands.deploy import register_deploy_command
from unideploy.commands.init_db import register_init_db_command
from unideploy.commands.status import register_status_commands
from unideploy.commands.teardown import register_teardown_command
from unideploy.logging_setup import setup_cli_logging


def main():
    parser = argparse.ArgumentParser(description="Unified web application deployment tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_deploy_command(subparsers)
    register_init_db_command(subparsers)
    register_teardown_command(subparsers)
    register_status_commands(subparsers)

    args = parser.parse_args()
    setup_cli_logging()
    args.func(args)


if __name__ == "__main__":
    main()
