from daemonwrap.cli.app import app

app()
