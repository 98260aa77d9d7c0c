# scripts/contact_api_smoke_test.py
import os, json
import requests
from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.getenv("CONTACT_API_BASE_URL", "http://127.0.0.1:3000").rstrip("/")
ACCESS_TOKEN = os.getenv("CONTACT_API_ACCESS_TOKEN")

def probe(page: int = 1, search: str = ""):
    params = {"page": page, "limit": 10}
    if search:
        params["search"] = search
    cookies = {"access_token": ACCESS_TOKEN} if ACCESS_TOKEN else {}

    r = requests.get(f"{BASE_URL}/api/contact", params=params, cookies=cookies, timeout=15)
    print("status:", r.status_code)
    if r.status_code == 401:
        raise SystemExit("401: set CONTACT_API_ACCESS_TOKEN in your .env (admin login cookie)")
    r.raise_for_status()

    body = r.json()
    if isinstance(body, dict) and "data" in body and "pagination" in body:
        print("shape: paginated ({} rows)".format(len(body["data"])))
        print("pagination:", json.dumps(body["pagination"], indent=2))
    elif isinstance(body, list):
        print("shape: legacy list ({} rows)".format(len(body)))
    else:
        print("shape: UNKNOWN ->", type(body).__name__)

if __name__ == "__main__":
    term = input("Search term (blank for none): ").strip()
    probe(1, term)
