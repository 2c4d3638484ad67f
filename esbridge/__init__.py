"""REST bridge exposing CRUD and term search for person documents stored in Elasticsearch."""

__version__ = "1.0.0"
