from gobertura.cli import cli

cli()
