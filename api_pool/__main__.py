from api_pool.cli import cli

cli()
