"""Run a quick smoke test against the app using FastAPI's TestClient."""

import sys
import os

# Ensure backend folder is on sys.path so `school_api` package can be imported
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient
from school_api.main import app


def run_testclient():
    client = TestClient(app)
    for path in ('/health', '/api/v1/classes', '/api/v1/students'):
        resp = client.get(path)
        print(path, 'STATUS:', resp.status_code)
        print('JSON:', resp.json())


if __name__ == '__main__':
    run_testclient()
