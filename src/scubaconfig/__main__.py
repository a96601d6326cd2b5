"""CLI entry point for scubaconfig.

Provides commands for validating, normalizing and creating
configuration documents, and for browsing the reference catalog.
"""

from pathlib import Path

import click

from scubaconfig import __version__
from scubaconfig.catalog import ReferenceCatalog, load_catalog
from scubaconfig.errors import ScubaConfigError


def _catalog(ctx: click.Context) -> ReferenceCatalog:
    try:
        return load_catalog(ctx.obj["catalog_path"])
    except (ScubaConfigError, FileNotFoundError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--catalog",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Reference catalog to use instead of the bundled one",
)
@click.pass_context
def cli(ctx: click.Context, catalog: Path | None) -> None:
    """Compliance assessment configuration tool.

    Reads, validates and writes the YAML documents that select which
    products to assess and which policies to omit, annotate or scope
    with exclusions.
    """
    from scubaconfig.settings import Settings
    from scubaconfig.utils.logging import configure_logging

    settings = Settings()
    configure_logging(settings.logging)
    ctx.obj = {"catalog_path": catalog or settings.catalog_path}


@cli.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Exit with an error if any warning is raised")
@click.pass_context
def validate(ctx: click.Context, config: Path, strict: bool) -> None:
    """Load a configuration file and report problems.

    Malformed policy ids, policies for unselected products and bad
    exclusion values are reported as warnings; the file still loads.
    """
    from scubaconfig.services.store import ConfigStore

    store = ConfigStore(_catalog(ctx))
    try:
        model = store.load_file(config)
    except ScubaConfigError as e:
        raise click.ClickException(str(e)) from e

    for warning in store.report.warnings:
        click.echo(f"  [WARN] {warning.code}: {warning.message}")

    click.echo(
        f"{config}: {len(model.product_names)} products, {len(model.omissions)} omissions, "
        f"{len(model.annotations)} annotations, {len(store.report.warnings)} warnings"
    )
    if strict and store.report.warnings:
        ctx.exit(1)


@cli.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write to this file instead of stdout",
)
@click.pass_context
def export(ctx: click.Context, config: Path, output: Path | None) -> None:
    """Rewrite a configuration file in canonical form."""
    from scubaconfig.document.exporter import DocumentExporter
    from scubaconfig.services.store import ConfigStore

    catalog = _catalog(ctx)
    store = ConfigStore(catalog)
    try:
        model = store.load_file(config)
    except ScubaConfigError as e:
        raise click.ClickException(str(e)) from e

    exporter = DocumentExporter(catalog)
    if output:
        exporter.export_file(model, output)
        click.echo(f"Configuration written to {output}", err=True)
    else:
        click.echo(exporter.export(model), nl=False)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write to this file instead of stdout",
)
@click.option("--all-products", is_flag=True, help="Select every catalog product")
@click.pass_context
def new(ctx: click.Context, output: Path | None, all_products: bool) -> None:
    """Write a configuration holding only default settings."""
    from scubaconfig.document.exporter import DocumentExporter
    from scubaconfig.models.config import ConfigModel

    catalog = _catalog(ctx)
    model = ConfigModel()
    if all_products:
        model = ConfigModel(product_names=catalog.product_codes)

    exporter = DocumentExporter(catalog)
    if output:
        exporter.export_file(model, output)
        click.echo(f"Configuration written to {output}", err=True)
    else:
        click.echo(exporter.export(model), nl=False)


@cli.command(name="catalog")
@click.option("--product", "-p", help="List the policies of this product")
@click.pass_context
def show_catalog(ctx: click.Context, product: str | None) -> None:
    """List known products, or the policies of one product."""
    catalog = _catalog(ctx)

    if product is None:
        for entry in catalog.products:
            suffix = " (exclusions)" if entry.supports_exclusions else ""
            click.echo(f"{entry.code:<15} {entry.display_name}{suffix}")
        return

    entry = catalog.product(product)
    if entry is None:
        raise click.ClickException(
            f"Unknown product '{product}'; expected one of {', '.join(catalog.product_codes)}"
        )

    click.echo(f"{entry.display_name}:")
    for policy in entry.policies:
        etype = catalog.exclusion_type(policy.exclusion_type)
        tag = f" [{etype.group_name}]" if etype else ""
        click.echo(f"  {policy.id}{tag} {policy.name}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
