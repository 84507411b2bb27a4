"""Fundamental checks of a stock and similarity of fund holdings.

``Checker.check_fundamentals`` reads a stock object exposing:

* ``fina_reports``: financial reports, latest first; each report has
  ``zcfzl``, ``newcapitalader``, ``non_per_loan``, ``bldkbbl`` and ``ld``
* ``current_report``: the latest report, with ``report_date_name``,
  ``roejq``, ``roejqtz``, ``epsjb``, ``epsjbtz``, ``totaloperatereve``,
  ``totaloperaterevetz``, ``parentnetprofit`` and ``parentnetprofittz``
* ``year_report(year)``: the annual report of a year, or ``None``
* ``value_list(kind, years)``, ``is_increasing_by_years(kind, years)`` and
  ``is_stability(kind, years)`` over annual reports, where ``kind`` is one of
  ``"roe"``, ``"eps"``, ``"revenue"``, ``"netprofit"``, ``"mll"``, ``"jll"``;
  the last value of a list is the latest year
* ``value_total_score``, ``valuation_score``, ``valuation_map``, ``price``,
  ``right_price``, ``price_space``, ``last_year_right_price``,
  ``last_year_final_price``, ``org_type``, ``historical_volatility``,
  ``total_market_cap``, ``roa``, ``zxgxl``, ``peg``, ``byys_ratio``,
  ``fina_report_opinion``, ``cashflows``, ``netcash_operate``,
  ``netcash_invest``, ``netcash_finance`` and ``netcash_free``
"""

from __future__ import annotations

import datetime as _dt
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

CheckResult = dict[str, dict[str, str]]

_FINANCIAL_ORG_TYPES = ("银行", "保险")


@dataclass
class CheckerOptions:
    """Thresholds and switches of the fundamental checks."""

    # 最新一期 ROE 不低于该值
    min_roe: float = 8.0
    # 连续增长年数
    check_years: int = 5
    # ROE 高于该值时不做连续增长检查
    no_check_years_roe: float = 20.0
    # 最大资产负债率百分比(%)
    max_debt_asset_ratio: float = 60.0
    # 最大历史波动率
    max_hv: float = 1.0
    # 最小市值（亿）
    min_total_market_cap: float = 100.0
    bank_min_roa: float = 0.5
    # 银行股最小资本充足率
    bank_min_zbczl: float = 8.0
    # 银行股最大不良贷款率
    bank_max_bldkl: float = 3.0
    # 银行股最低不良贷款拨备覆盖率
    bank_min_bldkbbfgl: float = 100.0
    is_check_mll_stability: bool = False
    is_check_jll_stability: bool = False
    is_check_price_by_calc: bool = True
    max_peg: float = 1.5
    # 本业营收比范围
    min_byys_ratio: float = 0.9
    max_byys_ratio: float = 1.1
    # 最小负债流动比
    min_fzldb: float = 1.0
    is_check_cashflow: bool = False
    is_check_mll_grow: bool = False
    is_check_jll_grow: bool = False
    is_check_eps_grow: bool = True
    is_check_rev_grow: bool = True
    is_check_netprofit_grow: bool = True
    # 最低股息率
    min_gxl: float = 0.0


def yi_wan_string(value: float) -> str:
    """Format an amount in units of 亿 (1e8) or 万 (1e4) with two decimals."""
    yi = value / 100000000.0
    if abs(yi) >= 1:
        return f"{yi:.2f}亿"
    wan = value / 10000.0
    if abs(wan) >= 1:
        return f"{wan:.2f}万"
    return f"{value:.2f}"


def _value(x: Any) -> str:
    """Format a number the way a plain value is printed in descriptions."""
    if isinstance(x, bool):
        return "true" if x else "false"
    if isinstance(x, int):
        return str(x)
    x = float(x)
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "+Inf" if x > 0 else "-Inf"
    if x.is_integer() and abs(x) < 1e21:
        return str(int(x))
    return repr(x)


def _values(items: Iterable[Any]) -> str:
    return "[" + " ".join(_value(v) for v in items) + "]"


@dataclass
class Checker:
    """Checks a stock's fundamentals against ``options``."""

    options: CheckerOptions = field(default_factory=CheckerOptions)

    def check_fundamentals(self, stock: Any) -> tuple[CheckResult, bool]:
        """Run every check; return the per-item results and whether all passed."""
        reports = list(stock.fina_reports or [])
        if not reports:
            return {}, False

        opts = self.options
        years = opts.check_years
        result: CheckResult = {}
        all_ok = True

        def record(name: str, desc: str, item_ok: bool) -> None:
            nonlocal all_ok
            result[name] = {"desc": desc, "ok": "true" if item_ok else "false"}
            if not item_ok:
                all_ok = False

        is_financial = stock.org_type in _FINANCIAL_ORG_TYPES
        latest = reports[0]

        # ROE of the latest annual report and of the latest report
        this_year = _dt.date.today().year
        last_year = stock.year_report(this_year - 1) or stock.year_report(this_year - 2)
        if last_year is None:
            raise ValueError("no annual report of the last two years")
        cur = stock.current_report
        desc = (
            f"{last_year.report_date_name}ROE:{last_year.roejq:.2f}%，"
            f"同比增长:{last_year.roejqtz:.2f}%<br/>"
            f"{cur.report_date_name}ROE:{cur.roejq:.2f}%，同比增长:{cur.roejqtz:.2f}%"
        )
        record(
            "净资产收益率(ROE)",
            desc,
            not (last_year.roejq < opts.min_roe and cur.roejq < opts.min_roe),
        )

        # ROE increasing unless its average is high enough
        name = f"ROE逐年递增（均值>={opts.no_check_years_roe:f}除外）"
        roe_list = list(stock.value_list("roe", years))
        desc = f"{years}年内ROE(年报):<br/>{_values(roe_list)}"
        if roe_list:
            roe_avg = sum(roe_list) / len(roe_list)
        else:
            logger.warning("roe avg error: empty values")
            roe_avg = 0.0
        item_ok = True
        if roe_avg < opts.no_check_years_roe and not stock.is_increasing_by_years("roe", years):
            desc = f"ROE{years}年内未逐年递增:<br/>{_values(roe_list)}"
            item_ok = False
        record(name, desc, item_ok)

        # EPS
        eps_list = list(stock.value_list("eps", years))
        desc = (
            f"{cur.report_date_name}EPS:{cur.epsjb:f},同比增长:{cur.epsjbtz:.2f}%"
            f"<br/>{years}年内EPS:<br/>{_values(eps_list)}"
        )
        item_ok = True
        if opts.is_check_eps_grow and eps_list:
            if eps_list[-1] <= 0 or not stock.is_increasing_by_years("eps", years):
                item_ok = False
        record("EPS逐年递增且 > 0", desc, item_ok)

        # Revenue
        rev_list = list(stock.value_list("revenue", years))
        desc = (
            f"{cur.report_date_name}营收:{yi_wan_string(cur.totaloperatereve)},"
            f"同比增长:{cur.totaloperaterevetz:.2f}%<br/>{years}年内营收:<br/>"
            + "<br/>".join(yi_wan_string(v) for v in rev_list)
        )
        item_ok = True
        if opts.is_check_rev_grow and rev_list:
            if rev_list[-1] <= 0 or not stock.is_increasing_by_years("revenue", years):
                item_ok = False
        record("营收逐年递增且>0", desc, item_ok)

        # Net profit
        np_list = list(stock.value_list("netprofit", years))
        desc = (
            f"{cur.report_date_name}净利润:{yi_wan_string(cur.parentnetprofit)},"
            f"同比增长:{cur.parentnetprofittz:.2f}%<br/>{years}年内净利润:<br/>"
            + "<br/>".join(yi_wan_string(v) for v in np_list)
        )
        item_ok = True
        if opts.is_check_netprofit_grow and np_list:
            if np_list[-1] <= 0 or not stock.is_increasing_by_years("netprofit", years):
                item_ok = False
        record("净利润逐年递增且>0", desc, item_ok)

        score = stock.value_total_score
        record("整体质地", score, score in ("优秀", "良好"))

        valuation = stock.valuation_score
        record("行业均值水平估值", valuation, valuation != "高于行业均值水平")

        valuation_map: Mapping[str, str] = stock.valuation_map or {}
        all_high = all(v == "估值较高" for v in valuation_map.values())
        record(
            "四率估值",
            "<br/>".join(k + v for k, v in valuation_map.items()),
            not all_high,
        )

        price = stock.price
        desc = (
            f"最新股价:{price:f}<br/>合理价:{stock.right_price:.2f}"
            f"({stock.price_space:.2f}%)<br/>去年合理价:{stock.last_year_right_price:.2f},"
            f"去年实际价格:{stock.last_year_final_price:.2f}"
        )
        record(
            "合理股价",
            desc,
            not (opts.is_check_price_by_calc and price > stock.right_price),
        )

        fzl = latest.zcfzl
        desc = f"负债率:{fzl:f}"
        item_ok = True
        if not is_financial and opts.max_debt_asset_ratio != 0 and fzl > opts.max_debt_asset_ratio:
            desc = f"负债率:{fzl:f}<br/>高于:{opts.max_debt_asset_ratio:f}"
            item_ok = False
        record("负债率", desc, item_ok)

        hv = stock.historical_volatility
        desc = f"历史波动率:{hv:f}"
        item_ok = True
        if opts.max_hv != 0 and hv > opts.max_hv:
            desc = f"历史波动率:{hv:f}<br/>高于:{opts.max_hv:f}"
            item_ok = False
        record("历史波动率", desc, item_ok)

        cap = yi_wan_string(stock.total_market_cap)
        desc = f"市值:{cap}"
        item_ok = True
        if stock.total_market_cap < opts.min_total_market_cap * 100000000:
            desc = f"市值:{cap}<br/>低于:{opts.min_total_market_cap:f}亿"
            item_ok = False
        record("市值", desc, item_ok)

        if stock.org_type == "银行":
            self._check_bank(stock, latest, record)

        mll_list = list(stock.value_list("mll", years))
        if opts.is_check_mll_stability and not is_financial:
            desc = f"{years}年内毛利率:<br/>{_values(mll_list)}"
            item_ok = True
            if not stock.is_stability("mll", years):
                desc = f"{years}年内稳定性较差:<br/>{_values(mll_list)}"
                item_ok = False
            record("毛利率稳定性", desc, item_ok)

        if opts.is_check_mll_grow and not is_financial and mll_list:
            desc = f"{years}年内毛利率:<br/>{_values(mll_list)}"
            item_ok = not (
                rev_list[len(mll_list) - 1] <= 0
                or not stock.is_increasing_by_years("mll", years)
            )
            record("毛利率逐年递增且>0", desc, item_ok)

        jll_list = list(stock.value_list("jll", years))
        desc = f"{years}年内净利率:<br/>{_values(jll_list)}"
        item_ok = True
        if opts.is_check_jll_stability and not stock.is_stability("jll", years):
            desc = f"{years}年内稳定性较差:<br/>{_values(jll_list)}"
            item_ok = False
        record("净利率稳定性", desc, item_ok)

        desc = f"{years}年内净利率:<br/>{_values(jll_list)}"
        item_ok = True
        if opts.is_check_jll_grow and jll_list:
            if rev_list[len(jll_list) - 1] <= 0 or not stock.is_increasing_by_years("jll", years):
                item_ok = False
        record("净利率逐年递增且>0", desc, item_ok)

        peg = stock.peg
        desc = f"PEG:{_value(peg)}"
        item_ok = True
        if opts.max_peg != 0:
            if peg > opts.max_peg:
                desc = f"PEG:{_value(peg)}<br/>高于:{_value(opts.max_peg)}"
                item_ok = False
            elif peg < 0:
                desc = f"PEG:{_value(peg)}<br/>低于:0"
                item_ok = False
        record("PEG", desc, item_ok)

        ratio = stock.byys_ratio
        desc = f"当前本业营收比:{_value(ratio)}"
        item_ok = True
        if opts.min_byys_ratio != 0 and opts.max_byys_ratio != 0:
            if ratio > opts.max_byys_ratio or ratio < opts.min_byys_ratio:
                desc = (
                    f"当前本业营收比:{_value(ratio)}<br/>超出范围:"
                    f"{_value(opts.min_byys_ratio)}-{_value(opts.max_byys_ratio)}"
                )
                item_ok = False
        record("本业营收比", desc, item_ok)

        opinion = stock.fina_report_opinion or ""
        record("财报审计意见", opinion, opinion in ("", "标准无保留意见"))

        gxl = stock.zxgxl
        desc = f"最新股息率: {gxl:f}"
        item_ok = True
        if gxl < opts.min_gxl:
            desc = f"最新股息率: {gxl:f} < {opts.min_gxl:f}"
            item_ok = False
        record("配发股利股息", desc, item_ok)

        record("负债流动比", f"最新负债流动比: {latest.ld:f}", latest.ld >= opts.min_fzldb)

        if stock.cashflows:
            desc = (
                f"经营活动产生的现金流量净额(>0):{yi_wan_string(stock.netcash_operate)}<br/>"
                f"投资活动产生的现金流量净额(<0):{yi_wan_string(stock.netcash_invest)}<br/>"
                f"筹资活动产生的现金流量净额:{yi_wan_string(stock.netcash_finance)}<br/>"
                f"自由现金流量(>0):{yi_wan_string(stock.netcash_free)}"
            )
            item_ok = True
            if opts.is_check_cashflow and (
                stock.netcash_operate < 0 or stock.netcash_invest > 0 or stock.netcash_free < 0
            ):
                item_ok = False
            record("现金流量", desc, item_ok)

        return result, all_ok

    def _check_bank(self, stock: Any, latest: Any, record: Any) -> None:
        opts = self.options

        desc = f"最新ROA:{stock.roa:f}"
        item_ok = True
        if stock.roa < opts.bank_min_roa:
            desc = f"ROA:{stock.roa:f}<br/>低于:{opts.bank_min_roa:f}"
            item_ok = False
        record("总资产收益率(ROA)", desc, item_ok)

        desc = f"资本充足率:{latest.newcapitalader:f}"
        item_ok = True
        if latest.newcapitalader < opts.bank_min_zbczl:
            desc = f"资本充足率:{latest.newcapitalader:f}<br/>低于:{opts.bank_min_zbczl:f}"
            item_ok = False
        record("资本充足率", desc, item_ok)

        desc = f"不良贷款率:{latest.non_per_loan:f}"
        item_ok = True
        if opts.bank_max_bldkl != 0 and latest.non_per_loan > opts.bank_max_bldkl:
            desc = f"不良贷款率:{latest.non_per_loan:f}<br/>高于:{opts.bank_max_bldkl:f}"
            item_ok = False
        record("不良贷款率", desc, item_ok)

        desc = f"不良贷款拨备覆盖率:{latest.bldkbbl:f}"
        item_ok = True
        if latest.bldkbbl < opts.bank_min_bldkbbfgl:
            desc = f"不良贷款拨备覆盖率:{latest.bldkbbl:f}<br/>低于:{opts.bank_min_bldkbbfgl:f}"
            item_ok = False
        record("不良贷款拨备覆盖率", desc, item_ok)


@dataclass
class FundStocksSimilarity:
    """How much a fund's holdings overlap with those of the other funds."""

    fund: Any
    # 1: identical, 0: entirely different
    similarity_value: float
    same_stocks: list[str] = field(default_factory=list)


def fund_stocks_similarity(funds: Mapping[str, Any]) -> list[FundStocksSimilarity]:
    """Compare each fund's stock names with those held by all other funds.

    ``funds`` maps fund codes to funds whose ``stocks`` have a ``name``.
    The result is ordered from most to least similar.
    """
    sims: list[FundStocksSimilarity] = []
    for code_a, fund in funds.items():
        set_a = {stock.name for stock in fund.stocks}
        set_b = {
            stock.name
            for code_b, other in funds.items()
            if code_b != code_a
            for stock in other.stocks
        }
        common = set_a & set_b
        union = set_a | set_b
        value = len(common) / len(union) if union else math.nan
        sims.append(FundStocksSimilarity(fund, value, sorted(common)))
    sims.sort(
        key=lambda s: (not math.isnan(s.similarity_value),
                       0.0 if math.isnan(s.similarity_value) else s.similarity_value),
        reverse=True,
    )
    return sims