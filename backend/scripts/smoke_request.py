"""Run a quick in-process check against the portal API.

Uses FastAPI's TestClient to hit the status routes; if the client cannot
be created, calls the `health()` controller directly instead.
"""

import sys
import os

# Ensure backend folder is on sys.path so `portal` can be imported from a checkout
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


def run_testclient():
    from fastapi.testclient import TestClient
    from portal.main import app
    client = TestClient(app)
    for path in ('/', '/health', '/university'):
        resp = client.get(path)
        print(path, 'STATUS:', resp.status_code, 'JSON:', resp.json())


if __name__ == '__main__':
    try:
        run_testclient()
    except ImportError as e:
        print('TestClient unavailable (%s); calling health() directly' % e)
        from portal.main import health
        print('Direct call to health():', health())
