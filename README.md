# spiderling

spiderling is a web crawling library. You give it a seed URL. It fetches the
page and pulls links out of response headers, HTML tags, inline scripts and
JavaScript or CSS files. If you ask it to, it also reads `robots.txt` and
`sitemap.xml`. It reports every endpoint it finds that falls within the
configured scope.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running a crawl

```python
from spiderling.options import Options
from spiderling.crawler_options import CrawlerOptions
from spiderling.standard import Crawler

options = Options(
    max_depth=2,
    body_read_size=2 * 1024 * 1024,
    timeout=10,
    concurrency=10,
    rate_limit=150,
    on_result=lambda result: print(result.url),
)
with CrawlerOptions(options) as crawler_options, Crawler(crawler_options) as crawler:
    crawler.crawl("https://example.com")
```

### How a crawl behaves

- Each result is written to standard output by the `StandardWriter`. A result
  is written when it is in scope, or when `display_out_scope` is set. The
  `on_result` callback, if given, receives every `Result`.
- Only responses up to `body_read_size` bytes are read. A value of `0` reads
  nothing, so set it.
- Links are followed until their depth reaches `max_depth`.
- `strategy` is either `"breadth-first"` or `"depth-first"`. Any other value,
  including the default, gives depth-first.
- `crawl_duration` is in seconds. When it runs out, `Crawler.crawl` raises
  `TimeoutError`.
- `known_files` takes one of these values:
  - `"robotstxt"`: read `robots.txt` before crawling.
  - `"sitemapxml"`: read `sitemap.xml` before crawling.
  - any other non-empty value: read both.
- `scrape_js_responses` turns on regex extraction from inline scripts,
  JavaScript and CSS files, and page text.

### Scope, filtering and deduplication

- Scoping is by host:
  - `field_scope="rdn"` (the default) matches the registered domain.
  - `field_scope="dn"` matches the domain name without its public suffix.
  - `field_scope="fqdn"` matches the exact host.
  - `no_scope=True` turns host scoping off.
- `scope` and `out_of_scope` add URL regular expressions.
- `extensions_match` and `extension_filter` select results by file extension.
  A built-in deny list of media and archive extensions applies unless
  `extensions_match` is given.
- URLs and response bodies are deduplicated for the lifetime of a
  `CrawlerOptions`.

### Requests

- `custom_headers` are `"Name: value"` strings that are added to every request.
- `proxy` is used for both http and https.
- `retries` sets how often a failed connection is retried.
- `rate_limit` sets the maximum requests per second. `rate_limit_minute` sets
  the maximum per minute. `delay` sets the seconds to wait before each
  request.

### Output

- `json` writes each result as one JSON object per line.
- `fields` prints only selected parts of each URL, for example `"path"` or
  `"fqdn,kv"`.
- `output_file` also writes results to a file, with colour codes removed.
- `store_fields` appends field values to per-host files under
  `spiderling_output/`.
- `store_response` (with optional `store_response_dir`, default
  `spiderling_responses`) saves each raw request and response, plus an
  `index.txt`.

The available output fields are `url`, `path`, `fqdn`, `rdn`, `rurl`, `qurl`,
`qpath`, `file`, `key`, `value`, `kv`, `dir` and `udir`.

## Building blocks

Extract endpoints from a piece of JavaScript:

```python
from spiderling.utils import extract_relative_endpoints

extract_relative_endpoints("var endpoint='/api/users.json';")
# ['/api/users.json']
```

Check whether a URL is in scope for a crawl rooted at `example.com`:

```python
from spiderling.scope import ScopeManager

manager = ScopeManager([], [r"logout\.php"], "rdn", False)
manager.validate("https://sub.example.com/index.php", "example.com")   # True
manager.validate("https://example.com/logout.php", "example.com")      # False
```

Filter paths by file extension:

```python
from spiderling.extensions import Validator

validator = Validator(["php", "html"], [])
validator.validate_path("/index.php")   # True
validator.validate_path("/logo.png")    # False
```

Other modules you can use on their own:

- `spiderling.tag_parsers` and `spiderling.parser`: the individual HTML and
  header parsers, and `parse_response`.
- `spiderling.known_files`: `robots.txt` and `sitemap.xml` readers.
- `spiderling.fields`: field formatting.
- `spiderling.crawlqueue`: breadth-first and depth-first queues.
- `spiderling.httpclient`: the HTTP client that reports redirects.

## What it does not do

- There is no command-line program. spiderling is used from Python code only,
  and it does not read target URLs from standard input or from files.
- Pages are fetched over plain HTTP and are never rendered in a browser. The
  options `headless`, `show_browser`, `use_installed_chrome`,
  `system_chrome_path`, `headless_no_sandbox` and `headless_optional_arguments`
  are accepted, but nothing acts on them.
- Forms are not filled in or submitted. `automatic_form_fill` and
  `form_config` have no effect.

## Responsible use

Only crawl sites you are allowed to crawl.