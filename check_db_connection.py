import os
import sys
import psycopg2
from dotenv import load_dotenv

load_dotenv()

TABLES = ("patients", "daily_logs", "weekly_logs", "share_tokens")

conn = None
try:
    conn = psycopg2.connect(os.environ["DATABASE_URL"], connect_timeout=5)
    with conn.cursor() as cur:
        cur.execute(
            "SELECT table_name FROM information_schema.tables WHERE table_schema = 'public' AND table_name = ANY(%s)",
            (list(TABLES),),
        )
        found = {row[0] for row in cur.fetchall()}
    print("✅ Connection successful!")
    missing = [t for t in TABLES if t not in found]
    if missing:
        print(f"⚠️  Missing tables (run `flask db upgrade`): {', '.join(missing)}")
        sys.exit(1)
except (KeyError, psycopg2.Error) as e:
    print(f"❌ Connection failed: {e}")
    sys.exit(1)
finally:
    if conn is not None:
        conn.close()
