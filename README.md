# investool

investool is a small library with two parts:

- HTTP clients for public Chinese financial data services. They cover bond yield curves, company profiles and cash flow statements.
- A configurable, rule-based checker for a listed company's fundamentals. The same module also holds a helper that measures how much fund holdings overlap.

## Installation

```
pip install investool
```

To run the tests:

```
pip install "investool[test]"
pytest
```

## Bond yields: `investool.chinabond`

```python
from investool.chinabond import ChinaBond, AAA_COMPANY_BOND

bonds = ChinaBond()                      # a requests.Session and a timeout may be passed
tree = bonds.query_tree()                # {curve name: curve id}
series = bonds.query_fxsyl(tree[AAA_COMPANY_BOND], "2021-11-19")   # [[years, yield], ...]
current = bonds.query_current_syl(AAA_COMPANY_BOND)                # yield of the first point
aaa = bonds.query_aaa_company_bond_syl()
```

- `query_fxsyl` returns an empty list when the service has no chart data for that date.
- `query_current_syl(bond_name, date=None)` queries the given `YYYY-mm-dd` date.
  - If no date is given, it uses the latest weekday, which comes from `latest_weekday()`.
  - It raises `ChinaBondError` when the curve name is unknown.
  - It also raises `ChinaBondError` when the data is empty or malformed.
- `ChinaBondError` is also raised when a request fails or the reply is not JSON.
- `query_aaa_company_bond_syl()` never raises. It logs the error and returns `0.0`.
- `TreeItem` holds one node of the curve tree.

## Company profiles: `investool.eastmoney`

```python
from investool.eastmoney import EastMoney

em = EastMoney()
profile = em.query_company_profile("002459.sz")
print(profile.name, profile.industry)
print(profile.profile_string())
print(profile.main_forms_string())   # grouped by industry, product and region
print(profile.keywords_string())     # keywords joined with ";"
```

`query_company_profile` returns a `CompanyProfile`. Its `main_forms` attribute is a list of `MainForm` items.

`get_fc` turns a code into the service's `fc` parameter:

- `600519.SH` becomes `60051901`.
- `.SZ` becomes `02`.
- Any other code gives an empty string.

A failed request, or a reply whose `Status` is not zero, raises `EastMoneyError`.

## Cash flow statements: `investool.cashflow`

```python
from investool.eastmoney import EastMoney
from investool.cashflow import query_fina_cashflow_data

rows = query_fina_cashflow_data(EastMoney(), "000958.SZ")
latest = rows[0]
print(latest.report_date_name, latest.netcash_operate, latest.netcash_invest)
print(latest["SALES_SERVICES_YOY"])
```

The function asks the service for up to ten reports, ordered by report date with the latest first.

Each row is a `CashflowData`:

- The common items are attributes, such as `netcash_operate`, `netcash_invest`, `netcash_finance` and `netprofit`.
- Every numeric item is also in `values`, keyed by its service name. Indexing the row looks up `values` and gives `0.0` for a missing item.

`parse_cashflow(rows)` builds the same objects from already-fetched data. A reply with a non-zero `code` raises `EastMoneyError`.

## Fundamentals checker: `investool.checker`

```python
from investool.checker import Checker, CheckerOptions

checker = Checker(CheckerOptions(min_roe=10.0, check_years=3))
result, ok = checker.check_fundamentals(stock)
for name, item in result.items():
    print(name, item["ok"], item["desc"])
```

`CheckerOptions()` carries the default thresholds and switches. For example, the minimum ROE is 8, the check spans 5 years, the maximum debt ratio is 60%, and the minimum market cap is 100 亿.

`check_fundamentals` returns two things:

- a dict mapping each check's name to `{"desc": ..., "ok": "true" | "false"}`;
- whether every check passed.

The checks cover:

- ROE level and growth
- EPS, revenue and net profit growth
- overall quality and valuation scores
- price against the estimated right price
- debt ratio
- historical volatility
- market cap
- bank ratios (for banks only)
- gross and net margin stability and growth
- PEG
- core revenue ratio
- audit opinion
- dividend yield
- current ratio
- cash flow

What happens when reports are missing:

- A stock with no financial reports gives `({}, False)`.
- If there is no annual report for either of the last two years, `ValueError` is raised.

The module docstring lists the attributes and methods the `stock` object must provide.

`fund_stocks_similarity(funds)` takes a mapping of fund code to fund. Each fund's `stocks` must have a `name`. For each fund, it computes the Jaccard similarity between that fund's stock names and the names held by all the other funds. It returns `FundStocksSimilarity` entries, most similar first, each with the shared names sorted.

`yi_wan_string(value)` formats an amount in 亿 or 万 with two decimals.

## What this package does not do

- It has no stock or fund model, and it does not assemble one from the data services. The caller supplies the `stock` and `fund` objects that the checker reads.
- It has no command-line tool.
- It has no exporter to spreadsheets, CSV, JSON or images.
- It has no web server and no scheduled data synchronisation.