import os
import sys
import requests

# Local API; override with API_BASE_URL
api_base = os.getenv("API_BASE_URL", "http://127.0.0.1:5000")


def get_access_token(email, password):
    url = f"{api_base}/api/v1/auth/login"
    payload = {
        "email": email,
        "password": password,
    }

    response = requests.post(url, json=payload, timeout=10)
    if response.status_code == 200:
        access_token = response.json().get("access_token")
        print("✅ Access token:", access_token)
        return access_token
    else:
        print("❌ Failed to log in:", response.json())


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("usage: python get_token.py <email> <password>")
        sys.exit(1)
    get_access_token(sys.argv[1], sys.argv[2])
