"""CLI entry point for pi-multiselect. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from pi.multiselect.errors import Cancelled, InvalidConfiguration, IoFailure
from pi.multiselect.items import Group
from pi.multiselect.prompt import MultiSelect
from pi.multiselect.terminal import ProcessTerminal

# Conventional exit status for "interrupted by the user"
EXIT_CANCELLED = 130


def make_terminal() -> ProcessTerminal:
    """The UI goes to stderr so stdout stays clean for the selection."""
    return ProcessTerminal()


def _parse_groups(ctx, param, values) -> list[Group]:
    """Turn ``LABEL:FIRST-LAST`` (inclusive item indices) into groups."""
    groups = []
    for value in values:
        label, sep, span = value.rpartition(":")
        first, dash, last = span.partition("-")
        try:
            start, stop = int(first), int(last if dash else first) + 1
        except ValueError:
            raise click.BadParameter(f"expected LABEL:FIRST-LAST, got {value!r}") from None
        if not sep or not label:
            raise click.BadParameter(f"expected LABEL:FIRST-LAST, got {value!r}")
        groups.append(Group(label, start, stop))
    return groups


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("items", nargs=-1, required=True)
@click.option("--prompt", "-p", default="", help="Text shown above the list")
@click.option(
    "--checked", "-c", type=int, multiple=True, help="Index of an item checked at start"
)
@click.option(
    "--disabled", "-d", type=int, multiple=True, help="Index of an item that cannot be checked"
)
@click.option(
    "--group", "-g", "groups", multiple=True, callback=_parse_groups, metavar="LABEL:FIRST-LAST",
    help="Put items FIRST..LAST under a header that toggles them together",
)
@click.option("--page-size", type=int, default=None, help="Rows of items shown at once")
@click.option("--filter/--no-filter", "filter_enabled", default=False,
              help="Type to filter the list")
@click.option("--start-filtering", is_flag=True, help="Start with the filter engaged")
@click.option("--wrap/--no-wrap", "wrap_navigation", default=True,
              help="Wrap around at the ends of the list")
@click.option("--no-report", is_flag=True, help="Do not print a summary line when confirmed")
@click.option("--keep", is_flag=True, help="Leave the list on screen after it closes")
@click.option("--index", "print_index", is_flag=True, help="Print indices instead of labels")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None,
              help="Write debug logs to this file")
def main(
    items,
    prompt,
    checked,
    disabled,
    groups,
    page_size,
    filter_enabled,
    start_filtering,
    wrap_navigation,
    no_report,
    keep,
    print_index,
    log_file,
):
    """Pick any number of ITEMS from an interactive checkbox list.

    The chosen items are printed to stdout, one per line.
    """
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    try:
        select = MultiSelect.from_options(
            items,
            terminal=make_terminal(),
            prompt=prompt,
            initial_checked=set(checked),
            disabled={index: None for index in disabled},
            page_size=page_size,
            groups=groups,
            filter_enabled=filter_enabled,
            start_filtering=start_filtering,
            wrap_navigation=wrap_navigation,
            report=not no_report,
            clear=not keep,
        )
        selected = select.interact()
    except InvalidConfiguration as exc:
        raise click.UsageError(str(exc)) from exc
    except Cancelled:
        click.echo("Cancelled", err=True)
        sys.exit(EXIT_CANCELLED)
    except IoFailure as exc:
        raise click.ClickException(str(exc)) from exc

    for index in selected:
        click.echo(index if print_index else items[index])


if __name__ == "__main__":
    main()
