from trend_digest.cli import app

app()
