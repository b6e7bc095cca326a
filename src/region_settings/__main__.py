from region_settings.cli import app

app()
