from smartflash.cli import run

run()
