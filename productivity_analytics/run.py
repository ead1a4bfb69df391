#!/usr/bin/env python
"""
Launcher for FHE Productivity Analytics

    python -m productivity_analytics.run server
    python -m productivity_analytics.run client
"""

import argparse
import subprocess
import sys
from pathlib import Path

from .utils.helpers import setup_logging


def launch_server():
    from .server.server import main as server_main

    server_main()


def launch_streamlit():
    """Launch Streamlit app"""
    app_path = Path(__file__).parent / 'main.py'

    print("\n🚀 Launching Streamlit...")
    print("=" * 50)

    try:
        subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)], check=False)
    except KeyboardInterrupt:
        print("\n👋 Application stopped by user")


def main(argv=None):
    parser = argparse.ArgumentParser(description="FHE Productivity Analytics")
    parser.add_argument('component', choices=['server', 'client'], help="what to start")
    args = parser.parse_args(argv)

    print("=" * 50)
    print("🔐 FHE Productivity Analytics - Launcher")
    print("=" * 50)

    if args.component == 'server':
        launch_server()
    else:
        setup_logging()
        launch_streamlit()


if __name__ == "__main__":
    main()
