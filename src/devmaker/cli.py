# cli.py
from __future__ import annotations

import sys

import click

from devmaker.config import RunConfig
from devmaker.errors import DevmakerError
from devmaker.runner import run_all_jobs
from devmaker.ui.console import Console, set_console, get_console


@click.command()
@click.option("-i", "--interactive", is_flag=True, default=False,
              help="Allow devmaker to ask for askable vars interactively.")
@click.option("-n", "--dry-run", is_flag=True, default=False,
              help="Don't run anything, just report how the run would go.")
@click.option("-E", "--no-allow-env", is_flag=True, default=False,
              help="Don't try to pull askable vars from env variables.")
@click.option("-a", "--ask-file", default=None, type=click.Path(dir_okay=False),
              help="A `VARNAME=value` formatted file to read vars from.")
@click.option("-w", "--with-vars", "ask_vars", multiple=True, metavar="VARNAME=value",
              help="A `VARNAME=value` pair; repeat the flag for each pair (-w A=1 -w B=2).")
@click.option("-s", "--single-job", default=None,
              help="A single job to run, ignoring dependencies.")
@click.option("-e", "--force-empty-vars", is_flag=True, default=False,
              help="Set all queried vars to empty strings. Useful for testing.")
@click.option("--debug", is_flag=True, default=False,
              help="Enable debug mode (show debug lines and stack traces)")
@click.argument("script_root", type=click.Path(file_okay=False))
def cli(interactive, dry_run, no_allow_env, ask_file, ask_vars, single_job,
        force_empty_vars, debug, script_root):
    """Apply startup scripts to a dev machine."""
    set_console(Console(debug=debug))
    console = get_console()

    try:
        config = RunConfig.from_options(
            script_root,
            interactive=interactive,
            dry_run=dry_run,
            no_allow_env=no_allow_env,
            ask_file=ask_file,
            ask_vars=ask_vars,
            single_job=single_job,
            force_empty_vars=force_empty_vars,
        )
        run_all_jobs(config)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except DevmakerError as e:
        console.print_exception(e)
        sys.exit(1)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
