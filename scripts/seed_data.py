#!/usr/bin/env python3
"""
Seed script: creates person documents through the API bulk endpoint (no direct ES access).
Run: API must be running.
  python scripts/seed_data.py
  python scripts/seed_data.py --count 500 --batch-size 100
"""

import argparse
import json
import random
import sys

import httpx

API_BASE = "http://localhost:8000/products"

FIRST_NAMES = [
    "Alice", "Bob", "Carmen", "Dmitri", "Elif", "Farid", "Grace", "Hiro",
    "Ingrid", "Jamal", "Keiko", "Luca", "Maya", "Nikolai", "Olga", "Pedro",
]

LAST_NAMES = [
    "Smith", "Johnson", "Garcia", "Müller", "Rossi", "Tanaka", "Kowalski",
    "Nguyen", "Silva", "Okafor", "Andersson", "Haddad",
]


def random_document() -> dict:
    born = f"{random.randint(1940, 2015)}-{random.randint(1, 12):02d}-{random.randint(1, 28):02d}"
    return {
        "first_name": random.choice(FIRST_NAMES),
        "last_name": random.choice(LAST_NAMES),
        "ttl": born,
    }


def main():
    ap = argparse.ArgumentParser(description="Seed person documents via the bulk endpoint")
    ap.add_argument("--count", type=int, default=100, help="Number of documents to create")
    ap.add_argument("--batch-size", type=int, default=50, help="Documents per bulk request")
    ap.add_argument("--base-url", default=API_BASE, help="Products API base URL")
    args = ap.parse_args()

    created = 0
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        remaining = args.count
        while remaining > 0:
            batch = [random_document() for _ in range(min(args.batch_size, remaining))]
            remaining -= len(batch)
            body = "\n".join(json.dumps(doc) for doc in batch)
            try:
                r = client.post("/_bulk", content=body, headers={"Content-Type": "application/json"})
                data = r.json()
                if data.get("status"):
                    created += len(batch)
                else:
                    errors.append(f"Bulk of {len(batch)}: {data.get('message')}")
            except httpx.HTTPError as e:
                errors.append(f"Bulk of {len(batch)}: {e}")
            print(f"  ... {created} documents")

    print(f"\nDone. Documents created: {created}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")
        sys.exit(1)


if __name__ == "__main__":
    main()
