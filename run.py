"""Local development entry point.

Usage:
    python run.py

Cron jobs run through the Flask CLI instead:
    flask --app run retry-pending-dns
    flask --app run check-dns-status
"""

from dotenv import load_dotenv

load_dotenv()  # Load .env before anything else

from toogo import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5001)
