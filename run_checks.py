import os

os.environ.setdefault("USE_MOCK_DB", "true")
os.environ.setdefault("MOCK_DB_PATH", "")

from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nDB HEALTH:')
resp = client.get('/health/db')
print(resp.status_code, resp.json())

print('\nLOGIN (register):')
resp = client.post('/api/auth/login', json={'phone_number': '919800000001', 'name': 'Check User'})
print(resp.status_code, resp.json().get('message'))

print('\nME (cookie):')
resp = client.get('/api/auth/me')
print(resp.status_code, resp.json().get('user', {}).get('login_count'))

print('\nLOGOUT:')
print(client.post('/api/auth/logout').json())
