#!/usr/bin/env python
"""
Start the CLI Application
"""
from ivis_data.cli.main import app

if __name__ == "__main__":
    app()
