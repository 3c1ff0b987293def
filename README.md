# trainingkit

Classic data structures and a few small services built on them. Everything is
pure Python using only the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Data structures

| Module | What it provides |
| --- | --- |
| `trainingkit.minheap` | `MinHeap`, a binary heap ordered by a `less(a, b)` function, with `insert`, `extract_min`, `peek`, `update` and `heapify_down`; reading from an empty heap raises `HeapEmptyError` |
| `trainingkit.fibheap` | `FibonacciHeap` with the same `less` ordering: `insert`, `extract_min`, `is_empty`, `len()` |
| `trainingkit.trie` | `Trie` with word frequencies: `insert`, `search` (returns found and frequency), `starts_with`, `autocomplete(prefix, limit)` |
| `trainingkit.suggest_bst` | `SuggestionTree`, an ordered collection ranking words by edit distance, then higher frequency, then alphabetically; exact duplicates are ignored |
| `trainingkit.editdistance` | `edit_distance(s1, s2, max_dist)`, Levenshtein distance that stops early and returns `max_dist + 1` once the limit is exceeded |
| `trainingkit.btree` | `BTree` of integers: `insert`, `search`, `delete`, `range_query`, `in_order`, and `visualize` returning an indented text listing |
| `trainingkit.price_index` | `PriceIndex`, a B-tree keyed by price that keeps the product ids at each price; range queries, in-order listing and paging |

Example:

```python
from trainingkit.btree import BTree
from trainingkit.suggest_bst import SuggestionTree

tree = BTree(8)
for key in (10, 20, 5, 6, 12, 30, 7, 17):
    tree.insert(key)
tree.search(5)            # True
tree.range_query(6, 50)   # [6, 7, 10, 12, 17, 20, 30]

ranking = SuggestionTree()
ranking.insert("banana", 1, 10)
ranking.insert("apple", 1, 10)
ranking.suggestions()     # ["apple", "banana"]
```

## Product store

`trainingkit.product_store` keeps `Product` records in a thread-safe
`ProductStore` indexed by price. It offers `add` (assigning an id when there is
none), `get`, `update` (raises `KeyError` for an unknown id), `delete`,
price-range queries through the index (`query_price_range`) or by scanning every
product (`query_price_range_linear`), `page(page, size)` in price order,
`by_category_sorted`, `stats()` returning `StoreStats` (counts per category,
counts in the price bands `0-50`, `51-100` and `100+`, and the average rating),
and `format_by_price()`.

## Spell checking

`trainingkit.spellcheck` loads a dictionary into a `Trie` (`load_dictionary`),
finds the input words that are not in it and, for each, suggests dictionary
words within two edits, ranked by `SuggestionTree` (`suggest_corrections`).
`check_words` runs the suggestions on a thread pool and returns a `Report` of
`Correction` entries; `Report.to_dict()` gives its JSON form.

```
trainingkit-spellcheck
```

reads `words.txt`, asks for a prefix on standard input and prints up to ten
completions, checks `input.txt` and writes `report.json`. The options `--words`,
`--input` and `--report` change those paths; `--cpuprofile FILE` writes per-call
timings and `--memprofile FILE` a memory snapshot.

## Scheduler simulation

`trainingkit.task` defines `Task` and `TaskStatus`. `trainingkit.schedulers` has
three schedulers sharing the `Scheduler` interface (`add_task`, `schedule`,
`shutdown`):

- `PriorityScheduler` always runs the waiting task with the lowest priority number.
- `AgingScheduler` does the same but, every half second, lowers the number of
  every waiting task by one (never below 1); `age()` performs one such step.
- `RoundRobinScheduler` keeps high (1-3), medium (4-7) and low (8-10) queues with
  quanta of 50, 100 and 200 ms; a new high-priority task pre-empts a running
  lower one.

`trainingkit.metrics.Metrics` (shared instance from `get_metrics()`) counts
completed tasks, context switches and starvation events (first run more than
five seconds after arrival); `report()` returns a text summary with throughput
and average wait per priority level.

```
trainingkit-scheduler-sim
```

feeds random tasks to all three schedulers until interrupted with Ctrl+C, then
drains the queues and prints the report. It writes per-call timings to
`cpu.prof` and a memory snapshot to `heap.prof`; `--cpuprofile` and
`--heapprofile` change those paths.

## Parking garage

`trainingkit.parking` models a garage of five floors with a hundred spots each.
`ParkingGarage.park` takes the nearest free spot on the requested floor,
`depart` frees it and returns an `ExitReceipt` with the fee (20 per started
hour, at least one hour, see `compute_fee`), `find` locates a vehicle by plate
regardless of case, and `floor_availability` counts free spots per floor;
`render_availability` draws them as bars. Invalid floors, empty plates,
duplicates, full floors and unknown vehicles raise `ParkingError`.

```
trainingkit-parking
```

starts an interactive menu for entry, exit, availability and search.

## Auction server

- `auction_models`: `User`, `Bid`, `Item` (bid history newest first) and
  `AuctionStats`, with `to_dict` / `from_dict` for their JSON form.
- `bid_heap`: `BidHeap`, a thread-safe max-heap of bids by amount.
- `category`: `CategoryTree` of nested categories under `All`; lookup by path or,
  for a single name, anywhere in the tree. Missing ones raise `CategoryNotFoundError`.
- `users`: `UserManager` with balances and a per-user undo stack of bid ids;
  failures raise `UserError`.
- `auction`: `AuctionManager` places, retracts and ends bids with a lock per
  item, browses categories and reports statistics; refusals raise `AuctionError`.
- `broker`: `Broker` hands new bids to bounded queues watching an item; a full
  queue misses the bid.
- `rate_limit`: a token-bucket `RateLimiter`, a per-user `RateLimiterRegistry`
  (5 tokens, refilled at 5 per second) and WSGI middleware for the `X-User-ID`
  header, logging, rate limiting and error recovery.
- `seed`: `seed(...)` runs a concurrent bidding, retraction and closing
  simulation against the managers and returns the winning bid.
- `auction_server`: `AuctionApp`, the WSGI application, and `build_app()`.

```
trainingkit-auction-server
```

serves the API on port 8080 (`--host` and `--port` change this) and re-runs
`seed` every ten seconds. Every request needs an `X-User-ID` header. Routes:

| Method | Path | Purpose |
| --- | --- | --- |
| POST | `/users` | create a user |
| GET | `/items?category=NAME` | items in a category and its subcategories |
| POST | `/items` | register an item |
| POST | `/items/{id}/bid` | place a bid (rate limited per user) |
| DELETE | `/items/{id}/bid/last` | retract your last bid |
| GET | `/items/{id}` | item details with bid history |
| GET | `/items/{id}/bids` | bid history |
| POST | `/items/{id}/end` | end the auction and return the winning bid |
| GET | `/stats` | auction statistics |
| GET | `/items/{id}/live` | server-sent events stream of new bids |

## What the package does not do

All data lives in memory; nothing is saved between runs. The product store is
a Python class only: there is no HTTP service for it and no load-testing tool.
The auction server exposes no profiling endpoints.