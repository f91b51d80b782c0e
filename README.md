# ecwidkit

A Python client and command-line tool for the Ecwid REST API. It covers two
parts of the API: abandoned carts and store categories.

## Installation

```
pip install ecwidkit
```

This installs the `ecwid` command.

## Configuration

Settings are read from, in order of precedence (highest first):

1. command-line flags
2. environment variables with the `ECWID_` prefix
3. a YAML config file (default `~/.ecwid.yaml`, or the one given with `--config`)
4. built-in defaults

A missing config file is not an error. A config file looks like this:

```yaml
store_id: "12345"
token: "token"
output: json        # json or table
log_level: info     # debug, info, warn or error
max_retries: 0      # retries on rate-limited (HTTP 429) requests
# base_url: https://app.ecwid.com/api/v3
```

The matching environment variables are `ECWID_STORE_ID`, `ECWID_TOKEN`,
`ECWID_OUTPUT`, `ECWID_LOG_LEVEL`, `ECWID_BASE_URL` and `ECWID_MAX_RETRIES`.

Empty fields get defaults: `base_url` is `https://app.ecwid.com/api/v3`,
`output` is `json`, `log_level` is `info`. `store_id` and `token` are
required; a command that talks to the API fails with a validation error
listing every problem if they are missing or if another value is invalid.

## Command line

Global options may be given before the command or after the subcommand:

```
ecwid --store-id 12345 --token token carts list
ecwid categories list --output table
```

| Option          | Meaning                                    |
|-----------------|--------------------------------------------|
| `--config`      | path to the YAML config file               |
| `--store-id`    | Ecwid store ID                             |
| `--token`       | API access token                           |
| `--output`      | `json` (default) or `table`                |
| `--log-level`   | `debug`, `info` (default), `warn`, `error` |
| `--base-url`    | API base URL                               |
| `--max-retries` | retries on rate-limited requests           |

Log messages are written to standard error as one JSON object per line.
On failure the command prints `Error: ...` to standard error and exits
with status 1.

### Version

```
ecwid version
```

Prints `ecwid-cli dev`; it needs no configuration.

### Abandoned carts

```
ecwid carts list --customer-id 7 --limit 20 --offset 0
ecwid carts get abc123
ecwid carts update abc123 --hidden
ecwid carts update abc123 --no-hidden
ecwid carts place abc123
```

`list` prints the whole search result (totals and items). `place` converts
an abandoned cart into an order.

### Categories

```
ecwid categories list --keyword shoes --parent 10 --limit 50 --offset 0
ecwid categories get 42
ecwid categories create --name "Shoes" --parent-id 10 --description "All shoes"
ecwid categories create --name "Drafts" --no-enabled
ecwid categories update 42 --name "Sneakers"
ecwid categories delete 42
```

`list` prints only the list of categories. Category IDs must be positive
integers. `create` requires `--name`; new categories are enabled unless
`--no-enabled` is given. `update` requires at least one of `--name`,
`--parent-id`, `--description`, `--enabled`/`--no-enabled`, and rejects
`--parent-id 0`.

### Output formats

`--output json` prints indented JSON. `--output table` prints aligned columns
whose headers are the upper-cased JSON field names; lists and nested objects
are shown as compact JSON, empty lists print `(empty)`.

## Library use

```python
from ecwidkit.config import Config, ConfigError

cfg = Config(store_id="12345", token="token").with_defaults()
try:
    cfg.validate()
except ConfigError as exc:
    print(exc.problems)

print(cfg.redacted_token())
print(cfg.to_json())   # the token is masked here too
```

```python
from ecwidkit.client import APIError, Requester, new_client
from ecwidkit.carts import SearchOptions

requester = Requester(store_id="12345", token="token", max_retries=2)
client = new_client(requester)

try:
    page = client.carts.search(SearchOptions(customer_id=7, limit=10))
    for cart in page.items:
        print(cart.cart_id, cart.total)
    shoes = client.categories.get(42)
except APIError as exc:
    print(exc.status_code, exc.message)
```

- `ecwidkit.config` — `Config`, `ConfigError` and the default values.
- `ecwidkit.loader.load(config_path, flags, env)` — builds a `Config` from
  file, environment and flags.
- `ecwidkit.client` — `Requester` sends authenticated JSON requests with
  the standard library and retries HTTP 429 responses up to `max_retries`
  times, honouring `Retry-After`; errors are raised as `APIError` carrying
  the status code. `new_client(requester)` returns a `Client` with `carts`
  and `categories` services.
- `ecwidkit.carts` — `CartsService` (`search`, `get`, `update`, `place`)
  and its data classes.
- `ecwidkit.categories` — `CategoriesService` (`search`, `get`, `create`,
  `update`, `delete`, `get_product_order`) and its data classes.
- `ecwidkit.cmdutil` — `output_result` and the input and flag helpers used
  by the command line.

## What it does not do

Only abandoned carts and categories are available. There are no services or
commands for products, orders, customers, coupons, promotions, dictionaries,
domains, the store profile, reports, reviews, staff or subscriptions.

## Running the tests

```
pip install "ecwidkit[test]"
pytest
```