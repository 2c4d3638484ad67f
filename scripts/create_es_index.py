#!/usr/bin/env python3
"""
Create the Elasticsearch products index with raw HTTP (no Python ES client).
The API also creates it on startup; use this when provisioning the cluster ahead of time:
  python scripts/create_es_index.py

Reads ELASTICSEARCH_URL and INDEX_NAME from .env (defaults http://localhost:9201, elastic_go).
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx
from esbridge.config import get_settings
from esbridge.search.elasticsearch_client import index_mappings, index_settings


def main():
    settings = get_settings()
    base = settings.elasticsearch_url.rstrip("/")
    url = f"{base}/{settings.index_name}"
    body = {"settings": index_settings(), "mappings": index_mappings()}

    with httpx.Client(timeout=30.0, verify=settings.elasticsearch_verify_certs) as client:
        r = client.head(url)
        if r.status_code == 200:
            print(f"Index '{settings.index_name}' already exists. Delete it first if you want to recreate:")
            print(f"  curl -X DELETE '{url}'")
            return
        r = client.put(url, json=body)
        if r.status_code not in (200, 201):
            print(f"Failed to create index: {r.status_code}")
            print(r.text[:500])
            sys.exit(1)
    print(f"Created index '{settings.index_name}' "
          f"({settings.index_shards} shards, {settings.index_replicas} replica).")


if __name__ == "__main__":
    main()
