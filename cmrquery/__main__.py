"""Fetch a page of production collections and print them."""

import logging

from .query import Query

ROUTE = "collections"
MODE = "CMR_OPS"
LIMIT = 2000


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    with Query(ROUTE, MODE) as query:
        results = query.get(LIMIT)
    print(results)


if __name__ == "__main__":
    main()
