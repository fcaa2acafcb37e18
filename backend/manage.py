#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""
import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def main():
    """Run administrative tasks."""
    # Ensure the backend package directory is on the Python path so that
    # the `accounts`, `vehicles`, `trips` and `billing` apps are importable.
    package_root = Path(__file__).resolve().parent
    if str(package_root) not in sys.path:
        sys.path.insert(0, str(package_root))

    # Load environment variables from backend/.env if present
    env_path = package_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'kamperhub.settings')
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
