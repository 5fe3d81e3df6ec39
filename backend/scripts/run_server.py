"""Serve the API with uvicorn.

Usage: python backend/scripts/run_server.py --host 0.0.0.0 --port 8000
"""

import argparse
import os
import sys

# Ensure backend folder is on sys.path so `school_api` package can be imported
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Run the School Management API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="restart on code changes (development)")
    args = parser.parse_args()
    uvicorn.run("school_api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == '__main__':
    main()
