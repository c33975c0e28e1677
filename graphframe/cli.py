"""
graphframe command line
Renders graph iframe pages from a YAML/JSON dataset registry
"""

import logging
import sys
from pathlib import Path

import click
import yaml

from .dataset import load_registry, name_from_query
from .errors import GraphError
from .page import DEFAULT_SIZE, MODES, iframe_tag, render_page, render_site


def _load(data: str):
    try:
        return load_registry(data)
    except (OSError, yaml.YAMLError) as e:
        raise GraphError(f'could not read {data}: {e}') from e


def _fail(message: str) -> None:
    click.echo(f'Error: {message}', err=True)
    sys.exit(1)


@click.group(context_settings={'auto_envvar_prefix': 'GRAPHFRAME'})
@click.option('-verbose', is_flag=True, help='Log debug output to stderr')
def main(verbose: bool):
    """Generate interactive time-series graph pages."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')


@main.command()
@click.option('-o', required=True, help='Output HTML file path')
@click.option('-data', required=True, help='Path to YAML or JSON graph registry')
@click.option('-name', default=None, help='Graph name within the registry')
@click.option('-url', default=None, help='Frame URL whose query string names the graph, e.g. graph.html?temps')
@click.option('-width', default=DEFAULT_SIZE[0], type=click.IntRange(min=1), help='Viewport width in pixels')
@click.option('-height', default=DEFAULT_SIZE[1], type=click.IntRange(min=1), help='Viewport height in pixels')
@click.option('-mode', default='auto', type=click.Choice(MODES), help='Theme mode: auto, light or dark')
def render(o: str, data: str, name: str, url: str, width: int, height: int, mode: str):
    """Render one graph to an HTML page."""
    if name is None and url is None:
        _fail('one of -name or -url is required')
    if name is None:
        name = name_from_query(url)

    try:
        registry = _load(data)
        html = render_page(registry.resolve(name), (width, height), mode)
    except GraphError as e:
        _fail(str(e))

    output_path = Path(o)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding='utf-8')

    click.echo(f'Generated graph: {o}')


@main.command()
@click.option('-o', required=True, help='Output directory; pages go in its iframes/ subdirectory')
@click.option('-data', required=True, help='Path to YAML or JSON graph registry')
@click.option('-width', default=DEFAULT_SIZE[0], type=click.IntRange(min=1), help='Viewport width in pixels')
@click.option('-height', default=DEFAULT_SIZE[1], type=click.IntRange(min=1), help='Viewport height in pixels')
@click.option('-mode', default='auto', type=click.Choice(MODES), help='Theme mode: auto, light or dark')
def build(o: str, data: str, width: int, height: int, mode: str):
    """Render every graph in the registry."""
    try:
        written = render_site(_load(data), o, (width, height), mode)
    except GraphError as e:
        _fail(str(e))

    for path in written:
        click.echo(f'Generated graph: {path}')


@main.command('list')
@click.option('-data', required=True, help='Path to YAML or JSON graph registry')
def list_graphs(data: str):
    """Print the graph names in the registry."""
    try:
        registry = _load(data)
    except GraphError as e:
        _fail(str(e))

    for name in registry.names():
        click.echo(name)


@main.command()
@click.option('-href', required=True, help='Relative path to the graph page')
@click.option('-name', required=True, help='Graph name passed in the query string')
@click.option('-width', default=DEFAULT_SIZE[0], type=click.IntRange(min=1), help='Frame width without border')
@click.option('-height', default=DEFAULT_SIZE[1], type=click.IntRange(min=1), help='Frame height without border')
@click.option('-caption', default=None, help='Figure caption')
def embed(href: str, name: str, width: int, height: int, caption: str):
    """Print the <iframe> snippet that embeds a graph in a page."""
    click.echo(iframe_tag(href, name, width, height, caption), nl=False)


if __name__ == '__main__':
    main()
